from wearly.db.models.comment import Comment
from wearly.db.models.content import CONTENT_MODELS, ContentItem, ContentKind, GeneralPost, Outfit, PostType
from wearly.db.models.engagement import EngagementEdge, EngagementKind
from wearly.db.models.follow import Follow
from wearly.db.models.notification import Notification, NotificationKind
from wearly.db.models.user import AccountKind, User

__all__ = [
    "AccountKind",
    "CONTENT_MODELS",
    "Comment",
    "ContentItem",
    "ContentKind",
    "EngagementEdge",
    "EngagementKind",
    "Follow",
    "GeneralPost",
    "Notification",
    "NotificationKind",
    "Outfit",
    "PostType",
    "User",
]
