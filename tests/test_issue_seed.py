import json
from pathlib import Path

import pytest
from sqlmodel import Session, select

from app.db.init_db import init_db
from app.db.session import engine
from app.models.enums import IssueStatus, UserRole
from app.models.issue import Issue
from app.models.user import User
from app.services.geo import haversine_distance
from app.services.issue_seed import ensure_user, load_presets, seed_issues
from app.services.auth_service import verify_password


def test_seed_issues_places_presets_around_center(tmp_path: Path):
    init_db(drop_all=True)
    payload = {
        "issues": [
            {"title": "Dark corner", "description": "Lamp is out", "category": "Lighting", "north": 500},
            {
                "title": "Flooded lane",
                "description": "Drain blocked",
                "category": "Water Supply",
                "east": -250,
                "status": "Resolved",
            },
        ]
    }
    preset_path = tmp_path / "issues.json"
    preset_path.write_text(json.dumps(payload), encoding="utf-8")

    presets = load_presets(preset_path)
    with Session(engine) as session:
        summary = seed_issues(session, presets, 51.5, -0.12, reporter_email="seed@example.com")
    assert summary.created == 2
    assert summary.skipped == 0

    with Session(engine) as session:
        reporter = session.exec(select(User).where(User.email == "seed@example.com")).first()
        assert reporter is not None
        issues = session.exec(select(Issue).where(Issue.owner_id == reporter.id)).all()
        by_title = {issue.title: issue for issue in issues}
        assert haversine_distance(51.5, -0.12, by_title["Dark corner"].latitude, by_title["Dark corner"].longitude) == pytest.approx(500, rel=1e-3)
        assert by_title["Flooded lane"].status == IssueStatus.RESOLVED

        again = seed_issues(session, presets, 51.5, -0.12, reporter_email="seed@example.com")
    assert again.created == 0
    assert again.skipped == 2


def test_load_presets_rejects_unknown_category(tmp_path: Path):
    preset_path = tmp_path / "issues.json"
    preset_path.write_text(json.dumps([{"title": "x", "description": "y", "category": "Parks"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_presets(preset_path)


def test_bundled_presets_are_valid():
    presets = load_presets(Path(__file__).resolve().parents[1] / "seeds" / "demo-issues.json")
    assert len(presets) == 6


def test_ensure_user_promotes_existing_account():
    init_db(drop_all=True)
    with Session(engine) as session:
        created = ensure_user(session, "ops@example.com", "ops")
        assert created.role == UserRole.CITIZEN
        promoted = ensure_user(session, "ops@example.com", "ops", role=UserRole.ADMIN, password="newsecret")
        assert promoted.id == created.id
        assert promoted.role == UserRole.ADMIN
        assert verify_password("newsecret", promoted.hashed_password)
