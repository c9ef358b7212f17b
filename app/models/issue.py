from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel
from app.models.enums import IssueCategory, IssueStatus, enum_column


class Issue(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'issues'
    __table_args__ = (sa.Index('ix_issues_lat_lng', 'latitude', 'longitude'),)

    title: str = Field(max_length=200)
    description: str = Field(sa_column=sa.Column(sa.Text(), nullable=False))
    category: IssueCategory = Field(sa_column=enum_column(IssueCategory, 'issue_category', index=True))
    status: IssueStatus = Field(
        default=IssueStatus.REPORTED,
        sa_column=enum_column(IssueStatus, 'issue_status', index=True),
    )
    longitude: float
    latitude: float
    # JSON-encoded list of image URLs
    images: Optional[str] = Field(default=None, sa_column=sa.Column(sa.Text()))
    owner_id: str = Field(index=True)
    is_anonymous: bool = False
