from app.models.base import IDModel, TimestampModel
from app.models.user import User
from app.models.refresh_token import RefreshToken
from app.models.issue import Issue
from app.models.issue_upvote import IssueUpvote
from app.models.flag import Flag
from app.models.notification import Notification

__all__ = [
    'IDModel',
    'TimestampModel',
    'User',
    'RefreshToken',
    'Issue',
    'IssueUpvote',
    'Flag',
    'Notification',
]
