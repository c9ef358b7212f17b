from typing import Optional
from loguru import logger
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from app.models.base import utc_now
from app.models.enums import FlagStatus, IssueStatus, ReviewAction
from app.models.flag import Flag
from app.models.issue import Issue
from app.schemas.flag import FlagCreate, FlagReview

# flags that still count against an issue
VISIBLE_FLAG_STATUSES = (FlagStatus.PENDING, FlagStatus.APPROVED)


class FlagConflictError(ValueError):
    pass


def create_flag(session: Session, issue_id: str, user_id: str, payload: FlagCreate) -> Flag:
    record = Flag(
        issue_id=issue_id,
        flagged_by=user_id,
        reason=payload.reason,
        description=payload.description,
    )
    session.add(record)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise FlagConflictError('You have already flagged this issue') from exc
    session.refresh(record)
    logger.info('issue {} flagged by {} ({})', issue_id, user_id, record.reason.value)
    return record


def get_flag(session: Session, flag_id: str) ->Optional[Flag]:
    return session.exec(select(Flag).where(Flag.id == flag_id)).first()


def review_flag(session: Session, record: Flag, reviewer_id: str, payload: FlagReview) -> tuple[Flag, bool]:
    """Move a pending flag to its terminal state.

    Returns the refreshed flag and whether the flagged issue was closed by
    this review. The transition is a single ``UPDATE ... WHERE status =
    'pending'``; losing that race raises ``FlagConflictError``.
    """
    new_status = FlagStatus.APPROVED if payload.action == ReviewAction.APPROVE else FlagStatus.REJECTED
    result = session.exec(
        update(Flag)
        .where((Flag.id == record.id) & (Flag.status == FlagStatus.PENDING))
        .values(
            status=new_status,
            reviewed_by=reviewer_id,
            reviewed_at=utc_now(),
            review_notes=payload.review_notes,
        )
    )
    if not result.rowcount:
        session.rollback()
        raise FlagConflictError('Flag has already been reviewed')

    issue_closed = False
    if new_status == FlagStatus.APPROVED:
        closed = session.exec(
            update(Issue)
            .where((Issue.id == record.issue_id) & (Issue.status != IssueStatus.CLOSED))
            .values(status=IssueStatus.CLOSED)
        )
        issue_closed = bool(closed.rowcount)

    session.commit()
    session.refresh(record)
    logger.info('flag {} {} by {}', record.id, new_status.value, reviewer_id)
    if issue_closed:
        logger.info('issue {} closed by moderation', record.issue_id)
    return record, issue_closed


def list_flags(
    session: Session,
    status:Optional[FlagStatus] = None,
    flagged_by:Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Flag], int]:
    conditions = []
    if status is not None:
        conditions.append(Flag.status == status)
    if flagged_by is not None:
        conditions.append(Flag.flagged_by == flagged_by)
    statement = (
        select(Flag)
        .where(*conditions)
        .order_by(Flag.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    total = session.exec(select(func.count()).select_from(Flag).where(*conditions)).one()
    return list(session.exec(statement).all()), int(total or 0)


def count_issue_flags(session: Session, issue_id: str) -> int:
    statement = select(func.count()).select_from(Flag).where(
        (Flag.issue_id == issue_id) & (Flag.status.in_(VISIBLE_FLAG_STATUSES))
    )
    result = session.exec(statement).one()
    return int(result or 0)


def get_flagged_issues(session: Session, issue_ids: list[str]) -> dict[str, Issue]:
    if not issue_ids:
        return {}
    rows = session.exec(select(Issue).where(Issue.id.in_(set(issue_ids)))).all()
    return {issue.id: issue for issue in rows}
