"""Wearly social graph & engagement service."""
