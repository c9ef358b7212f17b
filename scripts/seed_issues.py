from __future__ import annotations

import argparse
from pathlib import Path

from sqlmodel import Session

from app.db.init_db import init_db
from app.db.session import engine
from app.services.issue_seed import DEMO_REPORTER_EMAIL, load_presets, seed_issues


def main() -> None:
    parser = argparse.ArgumentParser(description='Seed demo issues around a center point.')
    parser.add_argument(
        '--path',
        default=str(Path(__file__).resolve().parents[1] / 'seeds' / 'demo-issues.json'),
        help='Path to presets JSON file',
    )
    parser.add_argument('--lat', type=float, default=40.7128, help='Center latitude')
    parser.add_argument('--lng', type=float, default=-74.0060, help='Center longitude')
    parser.add_argument(
        '--reporter-email',
        default=DEMO_REPORTER_EMAIL,
        help='Email of the demo user owning the seeded issues',
    )
    parser.add_argument('--dry-run', action='store_true', help='Validate only, do not write to DB')
    args = parser.parse_args()

    presets = load_presets(Path(args.path).expanduser())
    if args.dry_run:
        print(f"validated {len(presets)} preset issues")
        return

    init_db()
    with Session(engine) as session:
        summary = seed_issues(session, presets, args.lat, args.lng, reporter_email=args.reporter_email)
    print(f"seeded issues: created={summary.created} skipped={summary.skipped}")


if __name__ == '__main__':
    main()
