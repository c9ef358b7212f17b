from typing import Optional
from loguru import logger
from sqlmodel import Session, select
from app.core.config import settings
from app.db.session import engine
from app.models.enums import IssueStatus
from app.models.issue import Issue
from app.models.notification import ISSUE_STATUS_NOTIFICATION, Notification
from app.schemas.notification import NotificationUpdate


def create_notification(
    session: Session,
    user_id: str,
    content: str,
    issue_id:Optional[str] = None,
    type: str = ISSUE_STATUS_NOTIFICATION,
) -> Notification:
    record = Notification(user_id=user_id, issue_id=issue_id, type=type, content=content)
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def _status_message(issue: Issue, status: IssueStatus) -> str:
    link = f"{settings.FRONTEND_URL.rstrip('/')}/issues/{issue.id}"
    if status == IssueStatus.CLOSED:
        return f'Your issue "{issue.title}" was closed after a moderation review. {link}'
    return f'Your issue "{issue.title}" is now {status.value}. {link}'


def notify_status_change(issue_id: str, new_status: IssueStatus) -> None:
    """Tell the issue owner about a status change.

    Runs after the response has been sent, in its own session. Failures are
    logged and dropped; the status change itself is already committed.
    """
    try:
        with Session(engine) as session:
            issue = session.exec(select(Issue).where(Issue.id == issue_id)).first()
            if not issue:
                logger.warning('status notification skipped, issue {} no longer exists', issue_id)
                return
            create_notification(session, issue.owner_id, _status_message(issue, new_status), issue_id=issue.id)
        logger.info('status notification sent for issue {} ({})', issue_id, new_status.value)
    except Exception:
        logger.exception('status notification failed for issue {}', issue_id)


def list_notifications(
    session: Session,
    user_id: str,
    unread_only: bool = False,
    issue_id:Optional[str] = None,
    limit:Optional[int] = 50,
    offset: int = 0,
) -> list[Notification]:
    statement = (
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
    )
    if unread_only:
        statement = statement.where(Notification.read.is_(False))
    if issue_id is not None:
        statement = statement.where(Notification.issue_id == issue_id)
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def get_notification(session: Session, notification_id: str) ->Optional[Notification]:
    return session.exec(select(Notification).where(Notification.id == notification_id)).first()


def update_notification(session: Session, record: Notification, payload: NotificationUpdate) -> Notification:
    record.read = payload.read
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def mark_all_read(session: Session, user_id: str) -> int:
    notifications = session.exec(
        select(Notification).where((Notification.user_id == user_id) & (Notification.read.is_(False)))
    ).all()
    for record in notifications:
        record.read = True
        session.add(record)
    session.commit()
    return len(notifications)


def delete_notification(session: Session, record: Notification) -> None:
    session.delete(record)
    session.commit()
