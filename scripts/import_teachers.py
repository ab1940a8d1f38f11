import csv
import sys

from sqlalchemy.orm import Session

from core.exceptions import DomainError
from database.db import SessionLocal, init_db
from repositories.teachers import TeacherRepository
from services.teacher_service import TeacherService

CSV_PATH = "data/teachers.csv"  # default file path
COLUMNS = ("first_name", "last_name", "email", "subject", "phone")


def read_teachers(path: str) -> list:
    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        return [
            {column: (row.get(column) or "").strip() or None for column in COLUMNS}
            for row in reader
        ]


def migrate_teachers(path: str = CSV_PATH, db: Session = None) -> int:
    """Load teachers from CSV in one batch; a single bad row rejects the whole file."""
    owns_session = db is None
    db = db or SessionLocal()
    try:
        rows = read_teachers(path)
        created = TeacherService(TeacherRepository(db)).create_teachers(rows)
        return len(created)
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    init_db()
    try:
        count = migrate_teachers(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
    except DomainError as e:
        print(f"Import failed: {e.message}")
        sys.exit(1)
    print(f"Imported {count} teachers from CSV")
