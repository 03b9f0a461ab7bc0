"""Optional Pydantic Logfire integration.

When ``logfire.enabled`` is set and logfire is installed, engagement
operations are traced as spans, the ASGI app and the SQLAlchemy engine are
instrumented, and records from the ``wearly`` loggers are forwarded to
logfire. Otherwise every helper here is a no-op and stdlib logging is all
there is.

Usage:
    @observability.traced("engagement.follow")
    async def follow(self, actor_id, user_id): ...
"""

from __future__ import annotations

import functools
import inspect
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable
from uuid import UUID

if TYPE_CHECKING:
    from wearly.config import Settings

_logfire = None
_configured = False
_log_handler: logging.Handler | None = None

ROOT_LOGGER = "wearly"


def is_available() -> bool:
    return _logfire is not None and _configured


def configure(settings: Settings) -> bool:
    """Initialize logfire from the ``logfire`` settings section.

    Returns True when logfire was configured.
    """
    global _logfire, _configured

    if not settings.logfire.enabled:
        return False

    try:
        import logfire as lf
    except ImportError:
        logging.getLogger(__name__).warning("logfire.enabled is set but logfire is not installed")
        return False

    kwargs: dict[str, Any] = {
        "service_name": settings.logfire.service_name,
        "send_to_logfire": "if-token-present",
        "console": lf.ConsoleOptions() if settings.logfire.console else False,
    }
    if settings.logfire.environment:
        kwargs["environment"] = settings.logfire.environment
    if settings.logfire.sample_rate < 1.0:
        kwargs["sampling"] = lf.SamplingOptions(head=settings.logfire.sample_rate)

    lf.configure(**kwargs)
    _logfire = lf
    _configured = True
    _forward_logging(lf)
    return True


def _forward_logging(lf) -> None:
    """Send records from the wearly.* loggers to logfire as well."""
    global _log_handler

    if _log_handler is not None:
        return
    _log_handler = lf.LogfireLoggingHandler()
    logging.getLogger(ROOT_LOGGER).addHandler(_log_handler)


def instrument_app(app):
    """Wrap an ASGI app with logfire instrumentation. Returns the app unchanged if unavailable."""
    if not is_available():
        return app
    return _logfire.instrument_asgi(app)


def instrument_sqlalchemy(engine) -> None:
    if is_available():
        _logfire.instrument_sqlalchemy(engine=engine)


@contextmanager
def span(name: str, **attrs: Any):
    """Context manager that yields a logfire span, or None if unavailable."""
    if is_available():
        with _logfire.span(name, **attrs) as s:
            yield s
    else:
        yield None


def _id_attributes(signature: inspect.Signature, args: tuple, kwargs: dict) -> dict[str, str]:
    bound = signature.bind_partial(*args, **kwargs)
    return {
        name: str(value)
        for name, value in bound.arguments.items()
        if name.endswith("_id") and isinstance(value, UUID)
    }


def traced(name: str) -> Callable[[Callable], Callable]:
    """Run an async function inside a span named ``name``.

    UUID arguments whose names end in ``_id`` become span attributes.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not is_available():
                return await func(*args, **kwargs)
            with span(name, **_id_attributes(signature, args, kwargs)):
                return await func(*args, **kwargs)

        return wrapper

    return decorator


def info(msg: str, **kwargs: Any) -> None:
    if is_available():
        _logfire.info(msg, **kwargs)


def exception(msg: str, **kwargs: Any) -> bool:
    """Log an exception with traceback via logfire. Returns True if logged, False if unavailable."""
    if is_available():
        _logfire.exception(msg, **kwargs)
        return True
    return False
