"""Social graph data models package.

This package contains the entity models (accounts, posts, stories,
notifications, messages), the in-memory document store, the core components
(notification dedup store, engagement coordinator, follow state machine,
visibility gate) and the SocialGraphService that ties them together.
"""

from models.account import Account
from models.clock import ServiceClock
from models.config import ServiceSettings, load_settings
from models.engagement import EngagementCoordinator, LikeResult
from models.follow import FollowStateMachine, FollowStatus, RepairReport
from models.message import DirectMessage
from models.notification import Notification, NotificationType
from models.notification_store import NotificationStore
from models.post import Comment, Post
from models.service import SocialGraphService
from models.store import DocumentStore
from models.story import Story, StoryView
from models.visibility import VisibilityGate

__all__ = [
    "Account",
    "Comment",
    "DirectMessage",
    "DocumentStore",
    "EngagementCoordinator",
    "FollowStateMachine",
    "FollowStatus",
    "LikeResult",
    "Notification",
    "NotificationStore",
    "NotificationType",
    "Post",
    "RepairReport",
    "ServiceClock",
    "ServiceSettings",
    "SocialGraphService",
    "Story",
    "StoryView",
    "VisibilityGate",
    "load_settings",
]
