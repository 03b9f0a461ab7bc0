from wearly.lib.hooks import action, filter, hooks

__all__ = [
    "action",
    "filter",
    "hooks",
]
