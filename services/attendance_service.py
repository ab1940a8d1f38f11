"""
services/attendance_service.py

Daily attendance for teachers.

One row per (teacher, day). The row is created by the first check-in of the
day and completed in place by the check-out:

    no row --checkIn--> checked in --checkOut--> checked out

There are no reverse transitions. Every other request is rejected with
StateError (or ValidationError for an unknown status value).
"""

import logging
from datetime import date, datetime
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from core.enums import AttendanceStatus
from core.exceptions import ConflictError, NotFoundError, StateError, ValidationError
from core.metrics import Metrics, metrics as default_metrics
from models.attendance import Attendance as AttendanceModel
from repositories.attendance import AttendanceRepository
from repositories.teachers import TeacherRepository
from schemas.attendance import AttendanceDTO, AttendanceReport, AttendanceUpdate

logger = logging.getLogger(__name__)

NON_NULLABLE = ("teacher_id", "date", "status")


def parse_status(status: Union[str, AttendanceStatus]) -> AttendanceStatus:
    try:
        return AttendanceStatus(status)
    except ValueError:
        raise ValidationError("invalid status value", field="status") from None


def month_bounds(month: int, year: int) -> tuple:
    """[first day of month, first day of next month)"""
    if not 1 <= month <= 12:
        raise ValidationError("month must be 1-12", field="month")
    try:
        start = date(year, month, 1)
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    except (ValueError, OverflowError):
        raise ValidationError("invalid year", field="year") from None
    return start, end


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        teachers: TeacherRepository,
        metrics: Metrics = default_metrics,
    ):
        self._attendance = attendance
        self._teachers = teachers
        self._metrics = metrics

    # ==========================================================
    # check-in / check-out
    # ==========================================================

    def mark_attendance(
        self,
        teacher_id: int,
        status: Union[str, AttendanceStatus],
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceModel:
        action = parse_status(status)
        now = now or datetime.now()

        if self._teachers.get_by_id(teacher_id) is None:
            raise NotFoundError("Teacher not found", field="teacher_id", identifier=teacher_id)

        try:
            record = self._transition(teacher_id, action, now)
        except ConflictError:
            # another request inserted today's row between our lookup and insert
            logger.info(f"Attendance conflict for teacher {teacher_id} on {now.date()}, re-evaluating")
            record = self._transition(teacher_id, action, now)

        self.refresh_today_gauge(now.date())
        return record

    def _transition(self, teacher_id: int, action: AttendanceStatus, now: datetime) -> AttendanceModel:
        today = now.date()
        existing = self._attendance.find_by_teacher_and_date(teacher_id, today)

        if existing is None:
            if action is not AttendanceStatus.CHECK_IN:
                raise StateError("check-in required before check-out", field="status")

            record = self._attendance.create(
                teacher_id=teacher_id,
                day=today,
                status=AttendanceStatus.CHECK_IN.value,
                check_in=now,
            )
            self._metrics.attendance_created_total.inc()
            self._metrics.attendance_checkin_total.inc()
            logger.info(f"Teacher {teacher_id} checked in at {now.isoformat()}")
            return record

        if action is AttendanceStatus.CHECK_IN:
            raise StateError("already checked in for today", identifier=existing.id)

        if existing.check_in is None:
            raise StateError("cannot checkout without check-in", identifier=existing.id)
        if existing.check_out is not None:
            raise StateError("already checked out", identifier=existing.id)

        record = self._attendance.update(
            existing,
            {"check_out": now, "status": AttendanceStatus.CHECK_OUT.value},
        )
        self._metrics.attendance_checkout_total.inc()
        logger.info(f"Teacher {teacher_id} checked out at {now.isoformat()}")
        return record

    def count_checked_in_today(self, today: Optional[date] = None) -> int:
        return self._attendance.count_checked_in_on(today or date.today())

    def refresh_today_gauge(self, today: Optional[date] = None) -> int:
        count = self.count_checked_in_today(today)
        self._metrics.attendance_today_checked_in.set(count)
        return count

    # ==========================================================
    # CRUD
    # ==========================================================

    def list_attendance(self) -> List[AttendanceDTO]:
        return [AttendanceDTO.from_record(r) for r in self._attendance.get_all()]

    def get_attendance(self, attendance_id: int) -> AttendanceModel:
        record = self._attendance.get_by_id(attendance_id)
        if record is None:
            logger.info(f"Attendance not found: id={attendance_id}")
            raise NotFoundError("Attendance not found", identifier=attendance_id)
        return record

    def update_attendance(
        self,
        attendance_id: int,
        changes: Union[AttendanceUpdate, Mapping[str, Any]],
    ) -> AttendanceModel:
        if not isinstance(changes, AttendanceUpdate):
            try:
                changes = AttendanceUpdate.model_validate(changes)
            except PydanticValidationError as exc:
                first = exc.errors()[0]
                field = ".".join(str(part) for part in first["loc"])
                raise ValidationError(f"{field}: {first['msg']}", field=field) from exc
        values = changes.model_dump(exclude_unset=True)

        for key in NON_NULLABLE:
            if key in values and values[key] is None:
                raise ValidationError(f"{key} cannot be null", field=key)
        if "status" in values:
            values["status"] = parse_status(values["status"]).value
        if "teacher_id" in values and self._teachers.get_by_id(values["teacher_id"]) is None:
            raise NotFoundError("Teacher not found", field="teacher_id", identifier=values["teacher_id"])

        record = self.get_attendance(attendance_id)
        try:
            return self._attendance.update(record, values)
        except ConflictError as exc:
            # uq_attendance_teacher_date: the target day already has a row
            raise ValidationError(
                "attendance already exists for this teacher and date",
                field="date",
                identifier=attendance_id,
            ) from exc

    def delete_attendance(self, attendance_id: int) -> None:
        record = self.get_attendance(attendance_id)
        self._attendance.delete(record)
        logger.info(f"Attendance deleted: id={attendance_id}")
        self.refresh_today_gauge()

    # ==========================================================
    # reports
    # ==========================================================

    def attendance_by_teacher_month(
        self,
        teacher_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None,
        *,
        today: Optional[date] = None,
    ) -> AttendanceReport:
        today = today or date.today()
        start, end = month_bounds(
            today.month if month is None else month,
            today.year if year is None else year,
        )
        records = self._attendance.find_by_teacher_between(teacher_id, start, end)
        return AttendanceReport(attendance_list=[AttendanceDTO.from_record(r) for r in records])

    def attendance_by_day(
        self,
        day: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        *,
        today: Optional[date] = None,
    ) -> AttendanceReport:
        today = today or date.today()
        month = today.month if month is None else month
        if not 1 <= month <= 12:
            raise ValidationError("month must be 1-12", field="month")
        try:
            target = date(
                today.year if year is None else year,
                month,
                today.day if day is None else day,
            )
        except (ValueError, OverflowError):
            raise ValidationError("invalid date", field="date") from None

        records = self._attendance.find_by_date(target)
        return AttendanceReport(attendance_list=[AttendanceDTO.from_record(r) for r in records])
