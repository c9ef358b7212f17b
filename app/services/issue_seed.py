from __future__ import annotations

import json
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from loguru import logger
from sqlmodel import Session, select

from app.models.enums import IssueCategory, IssueStatus, UserRole
from app.models.issue import Issue
from app.models.user import User
from app.schemas.common import GeoPoint
from app.schemas.issue import IssueCreate
from app.services.auth_service import create_user, hash_password
from app.services.geo import offset_point
from app.services.issue_service import create_issue


DEMO_REPORTER_EMAIL = 'demo-reporter@example.com'


@dataclass(frozen=True)
class PresetIssue:
    title: str
    description: str
    category: IssueCategory
    # displacement from the seeding center, in meters
    north: float = 0.0
    east: float = 0.0
    status: IssueStatus = IssueStatus.REPORTED
    is_anonymous: bool = False


@dataclass(frozen=True)
class SeedSummary:
    created: int
    skipped: int


def ensure_user(
    session: Session,
    email: str,
    username: str,
    role: UserRole = UserRole.CITIZEN,
    password: str | None = None,
) -> User:
    """Fetch the account for ``email`` or create it, then make sure it has ``role``.

    A given password always replaces the stored one; a new account without a
    password gets a random one.
    """
    record = session.exec(select(User).where(User.email == email)).first()
    if not record:
        return create_user(session, username, email, password or secrets.token_urlsafe(24), role=role)
    if record.role != role or password:
        record.role = role
        if password:
            record.hashed_password = hash_password(password)
        session.add(record)
        session.commit()
        session.refresh(record)
        logger.info('user {} now {}', record.id, role.value)
    return record


def _parse_payload(raw: Any) -> list[PresetIssue]:
    if isinstance(raw, dict):
        items = raw.get('issues', [])
    else:
        items = raw
    if not isinstance(items, list):
        raise ValueError('preset issues must be a list or {issues: []}')
    presets: list[PresetIssue] = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError('each preset issue must be an object')
        title = str(item.get('title', '')).strip()
        description = str(item.get('description', '')).strip()
        if not title or not description:
            raise ValueError('preset issue requires title and description')
        presets.append(
            PresetIssue(
                title=title,
                description=description,
                category=IssueCategory(item.get('category')),
                north=float(item.get('north', 0)),
                east=float(item.get('east', 0)),
                status=IssueStatus(item.get('status') or IssueStatus.REPORTED),
                is_anonymous=bool(item.get('is_anonymous', False)),
            )
        )
    return presets


def load_presets(path: Path) -> list[PresetIssue]:
    raw = path.read_text(encoding='utf-8')
    return _parse_payload(json.loads(raw))


def seed_issues(
    session: Session,
    presets: Iterable[PresetIssue],
    latitude: float,
    longitude: float,
    *,
    reporter_email: str = DEMO_REPORTER_EMAIL,
) -> SeedSummary:
    """Create the preset issues around a center point, skipping titles the reporter already has."""
    reporter = ensure_user(session, reporter_email, reporter_email.split('@')[0])
    created = 0
    skipped = 0
    for preset in presets:
        existing = session.exec(
            select(Issue).where((Issue.owner_id == reporter.id) & (Issue.title == preset.title))
        ).first()
        if existing:
            skipped += 1
            continue
        lat, lng = offset_point(latitude, longitude, meters_north=preset.north, meters_east=preset.east)
        issue = create_issue(
            session,
            reporter.id,
            IssueCreate(
                title=preset.title,
                description=preset.description,
                category=preset.category,
                location=GeoPoint.from_lng_lat(lng, lat),
                is_anonymous=preset.is_anonymous,
            ),
        )
        if preset.status != IssueStatus.REPORTED:
            issue.status = preset.status
            session.add(issue)
            session.commit()
        created += 1
    return SeedSummary(created=created, skipped=skipped)
