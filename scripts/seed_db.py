#!/usr/bin/env python3
"""
Seed the database with companies and jobs from a JSON file.

Usage:
    python scripts/seed_db.py --input scripts/seed_data.json --db sqlite:///data/jobly.db
"""

import argparse
import json
from pathlib import Path
import sys

from jobly.database import init_database, session_context
from jobly.errors import DuplicateError, ValidationError
from jobly.repositories import companies, jobs


def seed(input_path: Path, database_url: str, dry_run: bool = False) -> dict:
    """
    Load companies, then jobs, through the repositories.

    Args:
        input_path: JSON file shaped {"companies": [...], "jobs": [...]}
        database_url: SQLAlchemy database URL
        dry_run: If True, don't write to database

    Returns:
        Counts of created, skipped and invalid records
    """
    print(f"Loading seed data from {input_path}...")
    with open(input_path, encoding="utf-8") as f:
        data = json.load(f)

    company_rows = data.get("companies", [])
    job_rows = data.get("jobs", [])
    print(f"Found {len(company_rows)} companies and {len(job_rows)} jobs")

    counts = {"created": 0, "skipped": 0, "invalid": 0}
    if dry_run:
        print("\n[DRY RUN] Would seed the following companies:")
        for i, company in enumerate(company_rows[:5], 1):
            print(f"  {i}. {company.get('handle')}: {company.get('name')}")
        if len(company_rows) > 5:
            print(f"  ... and {len(company_rows) - 5} more")
        return counts

    print(f"\nInitializing database at {database_url}...")
    init_database(database_url)

    with session_context(database_url) as session:
        for company in company_rows:
            try:
                companies.create(session, company)
                counts["created"] += 1
            except DuplicateError:
                print(f"Company {company.get('handle')} already exists, skipping")
                counts["skipped"] += 1
            except ValidationError as e:
                print(f"Invalid company {company.get('handle')}: {e.message}")
                counts["invalid"] += 1

        for job in job_rows:
            try:
                jobs.create(session, job)
                counts["created"] += 1
            except ValidationError as e:
                print(f"Invalid job {job.get('title')}: {e.message}")
                counts["invalid"] += 1

    print("\nSeeding complete!")
    print(f"   Created: {counts['created']}")
    print(f"   Skipped: {counts['skipped']}")
    print(f"   Invalid: {counts['invalid']}")
    return counts


def main():
    parser = argparse.ArgumentParser(description="Seed the Jobly database from JSON")
    parser.add_argument("--input", type=Path, default=Path("scripts/seed_data.json"),
                       help="Path to seed JSON file")
    parser.add_argument("--db", default="sqlite:///data/jobly.db",
                       help="Database URL")
    parser.add_argument("--dry-run", action="store_true",
                       help="Show what would be seeded without writing")

    args = parser.parse_args()

    if not args.input.exists():
        print(f"Seed file not found: {args.input}")
        sys.exit(1)

    seed(args.input, args.db, dry_run=args.dry_run)


if __name__ == "__main__":
    main()
