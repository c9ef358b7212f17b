from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlmodel import Session
from app.core.config import settings
from app.db.session import get_session
from app.models.enums import FlagStatus, IssueStatus
from app.models.flag import Flag
from app.models.user import User
from app.schemas.common import FlagPagination, page_meta
from app.schemas.flag import FlagCount, FlagCreate, FlagOut, FlagPage, FlaggedIssue, FlagReview
from app.services.auth_service import get_current_user, require_admin
from app.services.flag_service import (
    FlagConflictError,
    count_issue_flags,
    create_flag,
    get_flag,
    get_flagged_issues,
    list_flags,
    review_flag,
)
from app.services.issue_service import get_issue
from app.services.notification_service import notify_status_change

router = APIRouter(prefix='/flags', tags=['flags'])

ALL_STATUSES = 'all'


def _to_flag_outs(session: Session, flags: list[Flag]) -> list[FlagOut]:
    issues = get_flagged_issues(session, [record.issue_id for record in flags])
    results = []
    for record in flags:
        issue = issues.get(record.issue_id)
        results.append(
            FlagOut(
                id=record.id,
                issue_id=record.issue_id,
                issue=FlaggedIssue(
                    id=issue.id,
                    title=issue.title,
                    category=issue.category,
                    status=issue.status,
                )
                if issue
                else None,
                flagged_by=record.flagged_by,
                reason=record.reason,
                description=record.description,
                status=record.status,
                reviewed_by=record.reviewed_by,
                reviewed_at=record.reviewed_at,
                review_notes=record.review_notes,
                created_at=record.created_at,
            )
        )
    return results


def _to_page(session: Session, flags: list[Flag], total: int, page: int, limit: int) -> FlagPage:
    return FlagPage(
        flags=_to_flag_outs(session, flags),
        pagination=FlagPagination(**page_meta(page, limit, total), total_flags=total),
    )


def _as_status(value: str) ->Optional[FlagStatus]:
    if value == ALL_STATUSES:
        return None
    try:
        return FlagStatus(value)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f'Unknown flag status: {value}') from exc


@router.post('/issues/{issue_id}/flag', response_model=FlagOut, status_code=status.HTTP_201_CREATED)
def flag_issue_endpoint(
    issue_id: str,
    payload: FlagCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> FlagOut:
    if not get_issue(session, issue_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Issue not found')
    try:
        record = create_flag(session, issue_id, user.id, payload)
    except FlagConflictError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_flag_outs(session, [record])[0]


@router.get('/user', response_model=FlagPage)
def list_user_flags_endpoint(
    status_filter: str = Query(default=ALL_STATUSES, alias='status'),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=settings.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> FlagPage:
    flags, total = list_flags(
        session,
        status=_as_status(status_filter),
        flagged_by=user.id,
        page=page,
        limit=limit,
    )
    return _to_page(session, flags, total, page, limit)


@router.get('/issues/{issue_id}/count', response_model=FlagCount)
def issue_flag_count_endpoint(
    issue_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> FlagCount:
    """Unknown issue ids report zero flags rather than 404."""
    return FlagCount(issue_id=issue_id, flag_count=count_issue_flags(session, issue_id))


@router.get('/admin', response_model=FlagPage)
def list_all_flags_endpoint(
    status_filter: str = Query(default=FlagStatus.PENDING.value, alias='status'),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=settings.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> FlagPage:
    flags, total = list_flags(session, status=_as_status(status_filter), page=page, limit=limit)
    return _to_page(session, flags, total, page, limit)


@router.put('/admin/{flag_id}/review', response_model=FlagOut)
def review_flag_endpoint(
    flag_id: str,
    payload: FlagReview,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> FlagOut:
    record = get_flag(session, flag_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Flag not found')
    try:
        record, issue_closed = review_flag(session, record, admin.id, payload)
    except FlagConflictError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if issue_closed:
        background_tasks.add_task(notify_status_change, record.issue_id, IssueStatus.CLOSED)
    return _to_flag_outs(session, [record])[0]
