from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlmodel import Session
from app.core.config import settings
from app.db.session import get_session
from app.models.enums import IssueCategory, IssueStatus
from app.models.issue import Issue
from app.models.user import User
from app.schemas.common import GeoPoint, IssuePagination, page_meta
from app.schemas.issue import IssueCreate, IssueOut, IssueOwner, IssuePage, IssuePin, IssueStatusUpdate, IssueUpdate
from app.services.auth_service import get_current_user, get_optional_user, is_owner_or_admin, require_admin
from app.services.geo import RadiusFilter
from app.services.issue_service import (
    create_issue,
    delete_issue,
    get_issue,
    get_upvoters,
    get_usernames,
    issue_images_to_list,
    list_issues,
    nearby_issues,
    set_issue_status,
    toggle_upvote,
    update_issue,
)
from app.services.notification_service import notify_status_change

router = APIRouter(prefix='/issues', tags=['issues'])


def _radius_filter(lat:Optional[float], lng:Optional[float], radius: float) ->Optional[RadiusFilter]:
    if lat is None or lng is None:
        return None
    return RadiusFilter(latitude=lat, longitude=lng, radius=radius)


def _get_issue_or_404(session: Session, issue_id: str) -> Issue:
    issue = get_issue(session, issue_id)
    if not issue:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Issue not found')
    return issue


def _ensure_owner_or_admin(issue: Issue, user: User) -> None:
    if not is_owner_or_admin(user, issue.owner_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Not allowed')


def _to_issue_outs(session: Session, issues: list[Issue], viewer:Optional[User]) -> list[IssueOut]:
    ids = [issue.id for issue in issues]
    upvoters = get_upvoters(session, ids)
    usernames = get_usernames(session, [issue.owner_id for issue in issues])
    results = []
    for issue in issues:
        owner = None
        show_owner = not issue.is_anonymous or (viewer is not None and is_owner_or_admin(viewer, issue.owner_id))
        if show_owner and issue.owner_id in usernames:
            owner = IssueOwner(id=issue.owner_id, username=usernames[issue.owner_id])
        votes = upvoters.get(issue.id, [])
        results.append(
            IssueOut(
                id=issue.id,
                title=issue.title,
                description=issue.description,
                category=issue.category,
                status=issue.status,
                location=GeoPoint.from_lng_lat(issue.longitude, issue.latitude),
                images=issue_images_to_list(issue),
                is_anonymous=issue.is_anonymous,
                owner=owner,
                upvotes=votes,
                upvote_count=len(votes),
                created_at=issue.created_at,
                updated_at=issue.updated_at,
            )
        )
    return results


def _to_issue_out(session: Session, issue: Issue, viewer:Optional[User]) -> IssueOut:
    return _to_issue_outs(session, [issue], viewer)[0]


def _to_page(session: Session, issues: list[Issue], total: int, page: int, limit: int, viewer) -> IssuePage:
    return IssuePage(
        issues=_to_issue_outs(session, issues, viewer),
        pagination=IssuePagination(**page_meta(page, limit, total), total_issues=total),
    )


@router.post('', response_model=IssueOut, status_code=status.HTTP_201_CREATED)
def create_issue_endpoint(
    payload: IssueCreate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> IssueOut:
    issue = create_issue(session, user.id, payload)
    return _to_issue_out(session, issue, user)


@router.get('', response_model=IssuePage)
def list_issues_endpoint(
    lat:Optional[float] = Query(default=None, ge=-90, le=90),
    lng:Optional[float] = Query(default=None, ge=-180, le=180),
    radius: float = Query(default=settings.DEFAULT_RADIUS_METERS, gt=0),
    category:Optional[IssueCategory] = None,
    status_filter:Optional[IssueStatus] = Query(default=None, alias='status'),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=settings.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    viewer:Optional[User] = Depends(get_optional_user),
) -> IssuePage:
    issues, total = list_issues(
        session,
        geo=_radius_filter(lat, lng, radius),
        category=category,
        status=status_filter,
        page=page,
        limit=limit,
    )
    return _to_page(session, issues, total, page, limit, viewer)


@router.get('/nearby', response_model=list[IssuePin])
def nearby_issues_endpoint(
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
    radius: float = Query(default=settings.DEFAULT_RADIUS_METERS, gt=0),
    session: Session = Depends(get_session),
) -> list[IssuePin]:
    issues = nearby_issues(session, RadiusFilter(latitude=lat, longitude=lng, radius=radius))
    upvoters = get_upvoters(session, [issue.id for issue in issues])
    return [
        IssuePin(
            id=issue.id,
            title=issue.title,
            category=issue.category,
            status=issue.status,
            location=GeoPoint.from_lng_lat(issue.longitude, issue.latitude),
            upvote_count=len(upvoters.get(issue.id, [])),
            created_at=issue.created_at,
        )
        for issue in issues
    ]


@router.get('/user/{user_id}', response_model=IssuePage)
def list_user_issues_endpoint(
    user_id: str,
    status_filter:Optional[IssueStatus] = Query(default=None, alias='status'),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=settings.MAX_PAGE_SIZE),
    session: Session = Depends(get_session),
    viewer:Optional[User] = Depends(get_optional_user),
) -> IssuePage:
    include_anonymous = viewer is not None and is_owner_or_admin(viewer, user_id)
    issues, total = list_issues(
        session,
        status=status_filter,
        owner_id=user_id,
        include_anonymous=include_anonymous,
        page=page,
        limit=limit,
    )
    return _to_page(session, issues, total, page, limit, viewer)


@router.get('/{issue_id}', response_model=IssueOut)
def get_issue_endpoint(
    issue_id: str,
    session: Session = Depends(get_session),
    viewer:Optional[User] = Depends(get_optional_user),
) -> IssueOut:
    issue = _get_issue_or_404(session, issue_id)
    return _to_issue_out(session, issue, viewer)


@router.put('/{issue_id}/status', response_model=IssueOut)
def update_issue_status_endpoint(
    issue_id: str,
    payload: IssueStatusUpdate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
) -> IssueOut:
    issue = _get_issue_or_404(session, issue_id)
    issue, changed = set_issue_status(session, issue, payload.status)
    if changed:
        background_tasks.add_task(notify_status_change, issue.id, issue.status)
    return _to_issue_out(session, issue, admin)


@router.put('/{issue_id}/upvote', response_model=IssueOut)
def upvote_issue_endpoint(
    issue_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> IssueOut:
    issue = _get_issue_or_404(session, issue_id)
    toggle_upvote(session, issue.id, user.id)
    return _to_issue_out(session, issue, user)


@router.put('/{issue_id}', response_model=IssueOut)
def update_issue_endpoint(
    issue_id: str,
    payload: IssueUpdate,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> IssueOut:
    issue = _get_issue_or_404(session, issue_id)
    _ensure_owner_or_admin(issue, user)
    issue = update_issue(session, issue, payload)
    return _to_issue_out(session, issue, user)


@router.delete('/{issue_id}')
def delete_issue_endpoint(
    issue_id: str,
    session: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> dict:
    issue = _get_issue_or_404(session, issue_id)
    _ensure_owner_or_admin(issue, user)
    delete_issue(session, issue)
    return {'status': 'ok'}
