from collections import Counter
from datetime import datetime, timedelta, timezone
from sqlalchemy import func
from sqlmodel import Session, select
from app.models.base import ensure_utc
from app.models.enums import IssueStatus
from app.models.flag import Flag
from app.models.issue import Issue
from app.models.issue_upvote import IssueUpvote
from app.models.user import User
from app.schemas.statistics import (
    CommunityActivity,
    DashboardStats,
    Engagement,
    Hotspot,
    IssueBreakdown,
    IssuesReported,
    LocationCenter,
    LocationStats,
    LocationSummary,
    Overview,
    RecentActivity,
    TopReporter,
    TrendData,
    TrendPoint,
    TrendType,
    UserActivityStats,
)
from app.services.geo import RadiusFilter
from app.services.issue_service import issues_within

RECENT_DAYS = 30
TOP_REPORTERS = 5
HOTSPOT_LIMIT = 5
HOTSPOT_PRECISION = 3

_TREND_MODELS = {'issues': Issue, 'users': User, 'flags': Flag}


def _count(session: Session, model, *conditions) -> int:
    result = session.exec(select(func.count()).select_from(model).where(*conditions)).one()
    return int(result or 0)


def _grouped(session: Session, column, *conditions) -> dict[str, int]:
    rows = session.exec(select(column, func.count()).where(*conditions).group_by(column)).all()
    return {getattr(key, 'value', key): int(count) for key, count in rows}


def _since(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def _ratio(numerator: int, denominator: int, scale: float = 1.0) -> float:
    if denominator <= 0:
        return 0.0
    return round(numerator / denominator * scale, 2)


def dashboard_stats(session: Session) -> DashboardStats:
    total_issues = _count(session, Issue)
    resolved = _count(session, Issue, Issue.status == IssueStatus.RESOLVED)
    recent_start = _since(RECENT_DAYS)

    top_rows = session.exec(
        select(Issue.owner_id, User.username, func.count(Issue.id).label('issue_count'))
        .select_from(Issue)
        .join(User, User.id == Issue.owner_id)
        .group_by(Issue.owner_id, User.username)
        .order_by(func.count(Issue.id).desc())
        .limit(TOP_REPORTERS)
    ).all()

    return DashboardStats(
        overview=Overview(
            total_issues=total_issues,
            total_users=_count(session, User),
            total_flags=_count(session, Flag),
            resolution_rate=_ratio(resolved, total_issues, 100),
        ),
        issue_breakdown=IssueBreakdown(
            by_status=_grouped(session, Issue.status),
            by_category=_grouped(session, Issue.category),
        ),
        recent_activity=RecentActivity(
            new_issues=_count(session, Issue, Issue.created_at >= recent_start),
            new_users=_count(session, User, User.created_at >= recent_start),
        ),
        top_reporters=[
            TopReporter(user_id=owner_id, username=username, issue_count=int(count))
            for owner_id, username, count in top_rows
        ],
    )


def trend_data(session: Session, period: int, type: TrendType) -> TrendData:
    """Daily creation counts for the last ``period`` days, oldest first, zero-filled."""
    model = _TREND_MODELS[type]
    today = datetime.now(timezone.utc).date()
    first_day = today - timedelta(days=period - 1)
    start = datetime(first_day.year, first_day.month, first_day.day, tzinfo=timezone.utc)

    created = session.exec(select(model.created_at).where(model.created_at >= start)).all()
    per_day = Counter(ensure_utc(value).date() for value in created)

    points = []
    for offset in range(period):
        day = first_day + timedelta(days=offset)
        points.append(TrendPoint(date=day.isoformat(), count=per_day.get(day, 0)))
    return TrendData(period=f'{period} days', type=type, data=points)


def location_stats(session: Session, geo: RadiusFilter) -> LocationStats:
    issues = issues_within(session, geo)
    status_breakdown = Counter(issue.status.value for issue in issues)
    category_breakdown = Counter(issue.category.value for issue in issues)
    spots = Counter(
        (round(issue.latitude, HOTSPOT_PRECISION), round(issue.longitude, HOTSPOT_PRECISION))
        for issue in issues
    )
    return LocationStats(
        location=LocationCenter(latitude=geo.latitude, longitude=geo.longitude, radius=geo.radius),
        summary=LocationSummary(
            total_issues=len(issues),
            status_breakdown=dict(status_breakdown),
            category_breakdown=dict(category_breakdown),
        ),
        hotspots=[
            Hotspot(latitude=lat, longitude=lng, issue_count=count)
            for (lat, lng), count in spots.most_common(HOTSPOT_LIMIT)
        ],
    )


def user_activity_stats(session: Session, user: User) -> UserActivityStats:
    owned = Issue.owner_id == user.id
    total = _count(session, Issue, owned)
    upvotes_received = int(
        session.exec(
            select(func.count(IssueUpvote.id))
            .select_from(IssueUpvote)
            .join(Issue, Issue.id == IssueUpvote.issue_id)
            .where(owned)
        ).one()
        or 0
    )
    return UserActivityStats(
        issues_reported=IssuesReported(
            total=total,
            by_status=_grouped(session, Issue.status, owned),
            recent=_count(session, Issue, owned, Issue.created_at >= _since(RECENT_DAYS)),
        ),
        community=CommunityActivity(
            flags_submitted=_count(session, Flag, Flag.flagged_by == user.id),
            upvotes_given=_count(session, IssueUpvote, IssueUpvote.user_id == user.id),
            upvotes_received=upvotes_received,
        ),
        engagement=Engagement(
            total_upvotes_received=upvotes_received,
            average_upvotes_per_issue=_ratio(upvotes_received, total),
        ),
    )
