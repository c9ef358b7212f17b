from typing import Optional
import json
from loguru import logger
from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from app.core.config import settings
from app.models.enums import IssueCategory, IssueStatus
from app.models.flag import Flag
from app.models.issue import Issue
from app.models.issue_upvote import IssueUpvote
from app.models.user import User
from app.schemas.issue import IssueCreate, IssueUpdate
from app.services.geo import RadiusFilter


def _serialize_images(images:Optional[list[str]]) ->Optional[str]:
    if not images:
        return None
    return json.dumps(images)


def issue_images_to_list(issue: Issue) -> list[str]:
    if not issue.images:
        return []
    try:
        value = json.loads(issue.images)
    except json.JSONDecodeError:
        return [item.strip() for item in issue.images.split(',') if item.strip()]
    if isinstance(value, list):
        return [str(item) for item in value]
    return []


def create_issue(session: Session, owner_id: str, payload: IssueCreate) -> Issue:
    issue = Issue(
        title=payload.title,
        description=payload.description,
        category=payload.category,
        longitude=payload.location.longitude,
        latitude=payload.location.latitude,
        images=_serialize_images(payload.images),
        is_anonymous=payload.is_anonymous,
        owner_id=owner_id,
    )
    session.add(issue)
    session.commit()
    session.refresh(issue)
    logger.info('issue {} reported by {} ({})', issue.id, owner_id, issue.category.value)
    return issue


def get_issue(session: Session, issue_id: str) ->Optional[Issue]:
    return session.exec(select(Issue).where(Issue.id == issue_id)).first()


def _issue_conditions(
    geo:Optional[RadiusFilter] = None,
    category:Optional[IssueCategory] = None,
    status:Optional[IssueStatus] = None,
    owner_id:Optional[str] = None,
    include_anonymous: bool = True,
) -> list:
    conditions = []
    if geo is not None:
        box = geo.bounding_box()
        conditions.append(Issue.latitude.between(box.min_lat, box.max_lat))
        if box.min_lng is not None:
            conditions.append(Issue.longitude.between(box.min_lng, box.max_lng))
    if category is not None:
        conditions.append(Issue.category == category)
    if status is not None:
        conditions.append(Issue.status == status)
    if owner_id is not None:
        conditions.append(Issue.owner_id == owner_id)
    if not include_anonymous:
        conditions.append(Issue.is_anonymous.is_(False))
    return conditions


def _within(issues: list[Issue], geo: RadiusFilter) -> list[Issue]:
    return [issue for issue in issues if geo.contains(issue.latitude, issue.longitude)]


def list_issues(
    session: Session,
    geo:Optional[RadiusFilter] = None,
    category:Optional[IssueCategory] = None,
    status:Optional[IssueStatus] = None,
    owner_id:Optional[str] = None,
    include_anonymous: bool = True,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Issue], int]:
    """Return one newest-first page of issues and the total match count."""
    conditions = _issue_conditions(geo, category, status, owner_id, include_anonymous)
    statement = select(Issue).where(*conditions).order_by(Issue.created_at.desc())
    offset = (page - 1) * limit

    if geo is not None:
        # the bounding box over-selects corners; the exact radius check runs here
        matches = _within(list(session.exec(statement).all()), geo)
        return matches[offset : offset + limit], len(matches)

    total = session.exec(select(func.count()).select_from(Issue).where(*conditions)).one()
    issues = list(session.exec(statement.offset(offset).limit(limit)).all())
    return issues, int(total or 0)


def issues_within(session: Session, geo: RadiusFilter) -> list[Issue]:
    statement = select(Issue).where(*_issue_conditions(geo)).order_by(Issue.created_at.desc())
    return _within(list(session.exec(statement).all()), geo)


def nearby_issues(session: Session, geo: RadiusFilter, limit:Optional[int] = None) -> list[Issue]:
    if limit is None:
        limit = settings.NEARBY_LIMIT
    return issues_within(session, geo)[:limit]


def update_issue(session: Session, issue: Issue, payload: IssueUpdate) -> Issue:
    # explicit nulls leave a field as it is; images=[] clears the list
    data = payload.model_dump(exclude_unset=True)
    images = data.pop('images', None)
    if images is not None:
        issue.images = _serialize_images(images)
    for key, value in data.items():
        if value is None:
            continue
        setattr(issue, key, value)
    session.add(issue)
    session.commit()
    session.refresh(issue)
    return issue


def set_issue_status(session: Session, issue: Issue, status: IssueStatus) -> tuple[Issue, bool]:
    """Overwrite the status; the flag tells whether the value actually changed."""
    changed = issue.status != status
    issue.status = status
    session.add(issue)
    session.commit()
    session.refresh(issue)
    if changed:
        logger.info('issue {} status set to {}', issue.id, status.value)
    return issue, changed


def delete_issue(session: Session, issue: Issue) -> None:
    session.exec(delete(IssueUpvote).where(IssueUpvote.issue_id == issue.id))
    session.exec(delete(Flag).where(Flag.issue_id == issue.id))
    session.delete(issue)
    session.commit()
    logger.info('issue {} deleted', issue.id)


def toggle_upvote(session: Session, issue_id: str, user_id: str) -> bool:
    """Flip the user's upvote on an issue and return whether it is now upvoted.

    Removal is a conditional delete and insertion relies on the unique
    ``(issue_id, user_id)`` constraint, so the membership test and the write
    are never split across two statements.
    """
    removed = session.exec(
        delete(IssueUpvote).where((IssueUpvote.issue_id == issue_id) & (IssueUpvote.user_id == user_id))
    )
    if removed.rowcount:
        session.commit()
        return False

    session.add(IssueUpvote(issue_id=issue_id, user_id=user_id))
    try:
        session.commit()
    except IntegrityError:
        # a concurrent toggle inserted the same row first
        session.rollback()
        logger.debug('upvote by {} on {} already present', user_id, issue_id)
    return True


def get_upvoters(session: Session, issue_ids: list[str]) -> dict[str, list[str]]:
    if not issue_ids:
        return {}
    rows = session.exec(
        select(IssueUpvote)
        .where(IssueUpvote.issue_id.in_(issue_ids))
        .order_by(IssueUpvote.created_at.asc())
    ).all()
    result: dict[str, list[str]] = {issue_id: [] for issue_id in issue_ids}
    for row in rows:
        result[row.issue_id].append(row.user_id)
    return result


def get_usernames(session: Session, user_ids: list[str]) -> dict[str, str]:
    if not user_ids:
        return {}
    rows = session.exec(select(User.id, User.username).where(User.id.in_(set(user_ids)))).all()
    return {user_id: username for user_id, username in rows}
