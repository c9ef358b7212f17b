from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field
from app.models.enums import FlagReason, FlagStatus, IssueCategory, IssueStatus, ReviewAction
from app.schemas.common import FlagPagination


class FlagCreate(BaseModel):
    reason: FlagReason
    description:Optional[str] = Field(default=None, max_length=1000)


class FlagReview(BaseModel):
    action: ReviewAction
    review_notes:Optional[str] = Field(default=None, max_length=1000)


class FlaggedIssue(BaseModel):
    id: str
    title: str
    category: IssueCategory
    status: IssueStatus


class FlagOut(BaseModel):
    id: str
    issue_id: str
    issue:Optional[FlaggedIssue] = None
    flagged_by: str
    reason: FlagReason
    description:Optional[str] = None
    status: FlagStatus
    reviewed_by:Optional[str] = None
    reviewed_at:Optional[datetime] = None
    review_notes:Optional[str] = None
    created_at: datetime


class FlagPage(BaseModel):
    flags: list[FlagOut]
    pagination: FlagPagination


class FlagCount(BaseModel):
    issue_id: str
    flag_count: int
