from typing import Optional
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel

ISSUE_STATUS_NOTIFICATION = 'issue_status'


class Notification(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'notifications'

    user_id: str = Field(index=True)
    issue_id: Optional[str] = Field(default=None, index=True)
    type: str = ISSUE_STATUS_NOTIFICATION
    content: str
    read: bool = False
