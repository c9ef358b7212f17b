from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from app.models.enums import ASSIGNABLE_STATUSES, IssueCategory, IssueStatus
from app.schemas.common import GeoPoint, IssuePagination

MAX_IMAGES = 10


def _check_images(value:Optional[list[str]]) ->Optional[list[str]]:
    if value is None:
        return value
    if len(value) > MAX_IMAGES:
        raise ValueError(f'at most {MAX_IMAGES} images allowed')
    cleaned = [item.strip() for item in value if item and item.strip()]
    return cleaned


def _not_blank(value:Optional[str]) ->Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError('must not be blank')
    return value


class IssueCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=2000)
    category: IssueCategory
    location: GeoPoint
    images: list[str] = Field(default_factory=list)
    is_anonymous: bool = False

    @field_validator('title', 'description')
    @classmethod
    def not_blank(cls, value: str) -> str:
        return _not_blank(value)

    @field_validator('images')
    @classmethod
    def check_images(cls, value):
        return _check_images(value)


class IssueUpdate(BaseModel):
    title:Optional[str] = Field(default=None, min_length=1, max_length=200)
    description:Optional[str] = Field(default=None, min_length=1, max_length=2000)
    category:Optional[IssueCategory] = None
    images:Optional[list[str]] = None
    is_anonymous:Optional[bool] = None

    @field_validator('title', 'description')
    @classmethod
    def not_blank(cls, value):
        return _not_blank(value)

    @field_validator('images')
    @classmethod
    def check_images(cls, value):
        return _check_images(value)


class IssueStatusUpdate(BaseModel):
    status: IssueStatus

    @field_validator('status')
    @classmethod
    def assignable(cls, value: IssueStatus) -> IssueStatus:
        if value not in ASSIGNABLE_STATUSES:
            raise ValueError('status can only be set to Reported, In Progress or Resolved')
        return value


class IssueOwner(BaseModel):
    id: str
    username: str


class IssueOut(BaseModel):
    id: str
    title: str
    description: str
    category: IssueCategory
    status: IssueStatus
    location: GeoPoint
    images: list[str]
    is_anonymous: bool
    owner:Optional[IssueOwner] = None
    upvotes: list[str]
    upvote_count: int
    created_at: datetime
    updated_at: datetime


class IssuePage(BaseModel):
    issues: list[IssueOut]
    pagination: IssuePagination


class IssuePin(BaseModel):
    id: str
    title: str
    category: IssueCategory
    status: IssueStatus
    location: GeoPoint
    upvote_count: int
    created_at: datetime
