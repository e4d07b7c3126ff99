"""Client response models for the social graph API client.

This module re-exports the response models of the API layer so client
callers get typed results without depending on route modules directly.
"""

from api.models import AccountSummary, ActionResponse, CountResponse, PostResponse
from api.routes.accounts import PrivacyResponse, ProfileResponse
from api.routes.maintenance import RepairResponse, ValidateResponse
from api.routes.messages import ConversationResponse, MarkReadResponse
from api.routes.notifications import NotificationResponse
from api.routes.posts import BookmarkResponse
from api.routes.stories import StoryFeedResponse
from models.account import Account
from models.engagement import LikeResult
from models.follow import FollowStatus
from models.message import DirectMessage
from models.post import Comment
from models.story import Story

__all__ = [
    "Account",
    "AccountSummary",
    "ActionResponse",
    "BookmarkResponse",
    "Comment",
    "ConversationResponse",
    "CountResponse",
    "DirectMessage",
    "FollowStatus",
    "LikeResult",
    "MarkReadResponse",
    "NotificationResponse",
    "PostResponse",
    "PrivacyResponse",
    "ProfileResponse",
    "RepairResponse",
    "Story",
    "StoryFeedResponse",
    "ValidateResponse",
]
