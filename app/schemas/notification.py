from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class NotificationUpdate(BaseModel):
    read: bool


class NotificationOut(BaseModel):
    id: str
    type: str
    content: str
    issue_id:Optional[str] = None
    read: bool
    created_at: datetime
