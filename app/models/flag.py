from typing import Optional
from datetime import datetime
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel
from app.models.enums import FlagReason, FlagStatus, enum_column


class Flag(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'flags'
    __table_args__ = (sa.UniqueConstraint('issue_id', 'flagged_by'),)

    issue_id: str = Field(index=True)
    flagged_by: str = Field(index=True)
    reason: FlagReason = Field(sa_column=enum_column(FlagReason, 'flag_reason'))
    description: Optional[str] = Field(default=None, sa_column=sa.Column(sa.Text()))
    status: FlagStatus = Field(
        default=FlagStatus.PENDING,
        sa_column=enum_column(FlagStatus, 'flag_status', index=True),
    )
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    review_notes: Optional[str] = Field(default=None, sa_column=sa.Column(sa.Text()))
