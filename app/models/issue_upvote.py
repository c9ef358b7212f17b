import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from app.models.base import IDModel, TimestampModel


class IssueUpvote(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'issue_upvotes'
    __table_args__ = (sa.UniqueConstraint('issue_id', 'user_id'),)

    issue_id: str = Field(index=True)
    user_id: str = Field(index=True)
