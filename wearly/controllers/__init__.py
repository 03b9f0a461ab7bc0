from wearly.controllers.content import ContentController
from wearly.controllers.notifications import NotificationsController
from wearly.controllers.users import UsersController

__all__ = ["ContentController", "NotificationsController", "UsersController"]
