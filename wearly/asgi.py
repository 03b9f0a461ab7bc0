"""ASGI application factory for Wearly.

Serve with ``wearly serve`` or point any ASGI server at the factory::

    hypercorn --factory "wearly.asgi:create_app"
"""

import logging

from advanced_alchemy.extensions.litestar import SQLAlchemyPlugin
from litestar import Litestar
from litestar.di import Provide
from litestar.types import ASGIApp

from wearly.app_config import build_db_config, build_session_config
from wearly.config import Settings, get_settings
from wearly.controllers import ContentController, NotificationsController, UsersController
from wearly.controllers.helpers import provide_actor_id, provide_facade
from wearly.lib import observability
from wearly.lib.exceptions import EXCEPTION_HANDLERS

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> ASGIApp:
    """Create and configure the Litestar application."""
    settings = settings or get_settings()

    observability.configure(settings)

    db_config = build_db_config(settings)
    session_config = build_session_config(settings)

    async def on_startup(_app: Litestar) -> None:
        observability.instrument_sqlalchemy(db_config.get_engine())
        logger.info("Wearly engagement service started (db=%s)", db_config.get_engine().url.render_as_string())
        observability.info("Wearly engagement service started", debug=settings.debug)

    app = Litestar(
        on_startup=[on_startup],
        route_handlers=[UsersController, ContentController, NotificationsController],
        dependencies={
            "actor_id": Provide(provide_actor_id),
            "facade": Provide(provide_facade),
        },
        plugins=[SQLAlchemyPlugin(config=db_config)],
        middleware=[session_config.middleware],
        exception_handlers=EXCEPTION_HANDLERS,
        debug=settings.debug,
    )
    app.state.settings = settings

    return observability.instrument_app(app)
