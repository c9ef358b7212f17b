from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session
from app.core.config import settings
from app.db.session import get_session
from app.models.notification import Notification
from app.models.user import User
from app.schemas.notification import NotificationOut, NotificationUpdate
from app.services.auth_service import get_current_user
from app.services.notification_service import (
    delete_notification,
    get_notification,
    list_notifications,
    mark_all_read,
    update_notification,
)

router = APIRouter(prefix='/notifications', tags=['notifications'])


def _owned_notification(session: Session, notification_id: str, user: User) -> Notification:
    record = get_notification(session, notification_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Notification not found')
    if record.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not allowed')
    return record


def _to_notification_out(record: Notification) -> NotificationOut:
    return NotificationOut(
        id=record.id,
        type=record.type,
        content=record.content,
        issue_id=record.issue_id,
        read=record.read,
        created_at=record.created_at,
    )


@router.get('', response_model=list[NotificationOut])
def list_notifications_endpoint(
    unread_only: bool = False,
    issue_id:Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=settings.MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> list[NotificationOut]:
    records = list_notifications(
        session,
        user.id,
        unread_only=unread_only,
        issue_id=issue_id,
        limit=limit,
        offset=offset,
    )
    return [_to_notification_out(record) for record in records]


@router.patch('/{notification_id}', response_model=NotificationOut)
def update_notification_endpoint(
    notification_id: str,
    payload: NotificationUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> NotificationOut:
    record = _owned_notification(session, notification_id, user)
    return _to_notification_out(update_notification(session, record, payload))


@router.post('/read-all')
def mark_all_notifications_read(
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    return {'status': 'ok', 'updated': mark_all_read(session, user.id)}


@router.delete('/{notification_id}')
def delete_notification_endpoint(
    notification_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    delete_notification(session, _owned_notification(session, notification_id, user))
    return {'status': 'ok'}
