from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from models.attendance import Attendance as AttendanceModel
from models.teachers import Teacher as TeacherModel  # noqa: F401  Attendance.teacher target
from repositories.base import SessionRepository


class AttendanceRepository(SessionRepository):
    def _with_teacher(self, db):
        return db.query(AttendanceModel).options(joinedload(AttendanceModel.teacher))

    def create(
        self,
        *,
        teacher_id: int,
        day: date,
        status: str,
        check_in: Optional[datetime] = None,
    ) -> AttendanceModel:
        # a second row for the same (teacher, day) surfaces as ConflictError
        with self.guard("create attendance") as db:
            record = AttendanceModel(teacher_id=teacher_id, date=day, status=status, check_in=check_in)
            db.add(record)
            db.commit()
            db.refresh(record)
            return record

    def get_all(self) -> List[AttendanceModel]:
        with self.guard("list attendance") as db:
            return (
                self._with_teacher(db)
                .order_by(AttendanceModel.date, AttendanceModel.id)
                .all()
            )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceModel]:
        with self.guard("get attendance") as db:
            return self._with_teacher(db).filter(AttendanceModel.id == attendance_id).first()

    def update(self, record: AttendanceModel, values: dict) -> AttendanceModel:
        with self.guard("update attendance") as db:
            for key, value in values.items():
                setattr(record, key, value)
            db.commit()
            db.refresh(record)
            return record

    def delete(self, record: AttendanceModel) -> None:
        with self.guard("delete attendance") as db:
            db.delete(record)
            db.commit()

    def find_by_teacher_and_date(self, teacher_id: int, day: date) -> Optional[AttendanceModel]:
        """Exact match on teacher and calendar day."""
        with self.guard("find attendance") as db:
            return (
                db.query(AttendanceModel)
                .filter(AttendanceModel.teacher_id == teacher_id, AttendanceModel.date == day)
                .first()
            )

    def find_by_teacher_between(self, teacher_id: int, start: date, end: date) -> List[AttendanceModel]:
        """Rows of one teacher with start <= date < end."""
        with self.guard("find attendance by month") as db:
            return (
                self._with_teacher(db)
                .filter(
                    AttendanceModel.teacher_id == teacher_id,
                    AttendanceModel.date >= start,
                    AttendanceModel.date < end,
                )
                .order_by(AttendanceModel.date)
                .all()
            )

    def find_by_date(self, day: date) -> List[AttendanceModel]:
        with self.guard("find attendance by date") as db:
            return (
                self._with_teacher(db)
                .filter(AttendanceModel.date == day)
                .order_by(AttendanceModel.teacher_id)
                .all()
            )

    def count_checked_in_on(self, day: date) -> int:
        with self.guard("count checked in") as db:
            return (
                db.query(func.count(AttendanceModel.id))
                .filter(AttendanceModel.date == day, AttendanceModel.check_in.isnot(None))
                .scalar()
                or 0
            )
