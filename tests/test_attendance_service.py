from datetime import date, datetime

import pytest

from core.exceptions import NotFoundError, StateError, ValidationError
from models.attendance import Attendance as AttendanceModel
from repositories.attendance import AttendanceRepository
from repositories.teachers import TeacherRepository
from services.attendance_service import AttendanceService

MORNING = datetime(2024, 2, 14, 8, 30)
AFTERNOON = datetime(2024, 2, 14, 16, 45)


def _rows(db_session):
    return db_session.query(AttendanceModel).all()


class TestMarkAttendance:
    def test_checkout_without_checkin_fails(self, attendance_service, teacher, db_session):
        with pytest.raises(StateError, match="check-in required before check-out"):
            attendance_service.mark_attendance(teacher.id, "checkOut", now=AFTERNOON)

        assert _rows(db_session) == []

    def test_checkin_creates_one_record(self, attendance_service, teacher, db_session):
        record = attendance_service.mark_attendance(teacher.id, "checkIn", now=MORNING)

        rows = _rows(db_session)
        assert len(rows) == 1
        assert record.date == date(2024, 2, 14)
        assert record.check_in == MORNING
        assert record.check_out is None
        assert record.status == "checkIn"

    def test_second_checkin_same_day_fails(self, attendance_service, teacher, db_session):
        attendance_service.mark_attendance(teacher.id, "checkIn", now=MORNING)

        with pytest.raises(StateError, match="already checked in for today"):
            attendance_service.mark_attendance(teacher.id, "checkIn", now=AFTERNOON)

        assert len(_rows(db_session)) == 1

    def test_checkout_after_checkin(self, attendance_service, teacher):
        attendance_service.mark_attendance(teacher.id, "checkIn", now=MORNING)

        record = attendance_service.mark_attendance(teacher.id, "checkOut", now=AFTERNOON)

        assert record.check_in == MORNING
        assert record.check_out == AFTERNOON
        assert record.status == "checkOut"

    def test_second_checkout_fails(self, attendance_service, teacher):
        attendance_service.mark_attendance(teacher.id, "checkIn", now=MORNING)
        attendance_service.mark_attendance(teacher.id, "checkOut", now=AFTERNOON)

        with pytest.raises(StateError, match="already checked out"):
            attendance_service.mark_attendance(teacher.id, "checkOut", now=AFTERNOON)

    def test_next_day_starts_over(self, attendance_service, teacher, db_session):
        attendance_service.mark_attendance(teacher.id, "checkIn", now=MORNING)
        attendance_service.mark_attendance(teacher.id, "checkIn", now=datetime(2024, 2, 15, 8, 0))

        assert len(_rows(db_session)) == 2

    def test_checkout_of_row_without_checkin_fails(self, attendance_service, teacher, db_session):
        AttendanceRepository(db_session).create(teacher_id=teacher.id, day=MORNING.date(), status="checkIn")

        with pytest.raises(StateError, match="cannot checkout without check-in"):
            attendance_service.mark_attendance(teacher.id, "checkOut", now=AFTERNOON)

    def test_unknown_status_is_rejected(self, attendance_service, teacher, db_session):
        with pytest.raises(ValidationError) as exc_info:
            attendance_service.mark_attendance(teacher.id, "lunchBreak", now=MORNING)

        assert exc_info.value.field == "status"
        assert _rows(db_session) == []

    def test_unknown_teacher(self, attendance_service):
        with pytest.raises(NotFoundError):
            attendance_service.mark_attendance(404, "checkIn", now=MORNING)

    def test_counters(self, attendance_service, teacher, test_metrics):
        attendance_service.mark_attendance(teacher.id, "checkIn", now=MORNING)
        attendance_service.mark_attendance(teacher.id, "checkOut", now=AFTERNOON)

        assert test_metrics.registry.get_sample_value("attendance_created_total") == 1
        assert test_metrics.registry.get_sample_value("attendance_checkin_total") == 1
        assert test_metrics.registry.get_sample_value("attendance_checkout_total") == 1

    def test_today_gauge(self, attendance_service, teacher, test_metrics):
        attendance_service.mark_attendance(teacher.id, "checkIn")

        assert test_metrics.registry.get_sample_value("attendance_today_checked_in") == 1
        assert attendance_service.count_checked_in_today() == 1

    def test_today_gauge_uses_the_supplied_clock(self, attendance_service, teacher, test_metrics):
        attendance_service.mark_attendance(teacher.id, "checkIn", now=MORNING)

        assert test_metrics.registry.get_sample_value("attendance_today_checked_in") == 1
        assert attendance_service.count_checked_in_today(MORNING.date()) == 1


class StaleAttendanceRepository(AttendanceRepository):
    """Misses today's row once, like a request that lost the race to a concurrent check-in."""

    def __init__(self, db):
        super().__init__(db)
        self.stale_reads = 1

    def find_by_teacher_and_date(self, teacher_id, day):
        if self.stale_reads:
            self.stale_reads -= 1
            return None
        return super().find_by_teacher_and_date(teacher_id, day)


def test_concurrent_checkin_resolved_by_unique_constraint(db_session, teacher, test_metrics):
    AttendanceRepository(db_session).create(
        teacher_id=teacher.id, day=MORNING.date(), status="checkIn", check_in=MORNING
    )
    service = AttendanceService(StaleAttendanceRepository(db_session), TeacherRepository(db_session), test_metrics)

    with pytest.raises(StateError, match="already checked in for today"):
        service.mark_attendance(teacher.id, "checkIn", now=AFTERNOON)

    assert len(_rows(db_session)) == 1


class TestQueries:
    @pytest.fixture
    def records(self, db_session, teacher):
        repo = AttendanceRepository(db_session)
        days = [date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 29), date(2024, 3, 1)]
        return [
            repo.create(
                teacher_id=teacher.id,
                day=day,
                status="checkIn",
                check_in=datetime.combine(day, MORNING.time()),
            )
            for day in days
        ]

    def test_monthly_report_covers_whole_month(self, attendance_service, teacher, records):
        report = attendance_service.attendance_by_teacher_month(teacher.id, 2, 2024)

        assert [dto.date for dto in report.attendance_list] == ["01-02-2024", "29-02-2024"]
        assert all(dto.teacher_name == "Ada Lovelace" for dto in report.attendance_list)
        assert all(dto.teacher_id == teacher.id for dto in report.attendance_list)

    def test_monthly_report_december(self, attendance_service, teacher, db_session):
        AttendanceRepository(db_session).create(teacher_id=teacher.id, day=date(2023, 12, 31), status="checkIn")

        report = attendance_service.attendance_by_teacher_month(teacher.id, 12, 2023)

        assert [dto.date for dto in report.attendance_list] == ["31-12-2023"]

    def test_monthly_report_defaults_to_current_month(self, attendance_service, teacher, records):
        report = attendance_service.attendance_by_teacher_month(teacher.id, today=date(2024, 3, 10))

        assert [dto.date for dto in report.attendance_list] == ["01-03-2024"]

    def test_monthly_report_other_teacher_is_empty(self, attendance_service, teacher_service, records):
        other = teacher_service.create_teacher(
            {"first_name": "Alan", "last_name": "Turing", "email": "alan@school.edu"}
        )

        assert attendance_service.attendance_by_teacher_month(other.id, 2, 2024).attendance_list == []

    def test_monthly_report_rejects_bad_month(self, attendance_service, teacher):
        with pytest.raises(ValidationError, match="month must be 1-12"):
            attendance_service.attendance_by_teacher_month(teacher.id, 13, 2024)

    def test_day_report(self, attendance_service, records):
        report = attendance_service.attendance_by_day(29, 2, 2024)

        assert len(report.attendance_list) == 1
        assert report.attendance_list[0].date == "29-02-2024"
        assert report.attendance_list[0].check_in == datetime(2024, 2, 29, 8, 30)

    def test_day_report_defaults_to_today(self, attendance_service, records):
        report = attendance_service.attendance_by_day(today=date(2024, 1, 31))

        assert [dto.date for dto in report.attendance_list] == ["31-01-2024"]

    def test_day_report_rejects_impossible_date(self, attendance_service):
        with pytest.raises(ValidationError, match="invalid date"):
            attendance_service.attendance_by_day(30, 2, 2024)

    def test_reports_reject_out_of_range_numbers(self, attendance_service, teacher):
        with pytest.raises(ValidationError, match="invalid year"):
            attendance_service.attendance_by_teacher_month(teacher.id, 1, 10**20)
        with pytest.raises(ValidationError, match="invalid date"):
            attendance_service.attendance_by_day(1, 1, 10**20)
        with pytest.raises(ValidationError, match="invalid date"):
            attendance_service.attendance_by_day(10**20, 1, 2024)

    def test_list_attendance_projects_teacher(self, attendance_service, records):
        listing = attendance_service.list_attendance()

        assert len(listing) == 4
        assert listing[0].teacher_name == "Ada Lovelace"
        assert listing[0].date == "31-01-2024"

    def test_get_and_delete(self, attendance_service, records):
        target = records[0].id
        assert attendance_service.get_attendance(target).teacher.first_name == "Ada"

        attendance_service.delete_attendance(target)

        with pytest.raises(NotFoundError):
            attendance_service.get_attendance(target)

    def test_delete_unknown(self, attendance_service):
        with pytest.raises(NotFoundError) as exc_info:
            attendance_service.delete_attendance(12345)

        assert exc_info.value.identifier == 12345

    def test_update_fields(self, attendance_service, records):
        updated = attendance_service.update_attendance(
            records[1].id, {"check_out": "2024-02-01T17:00:00", "status": "checkOut"}
        )

        assert updated.check_out == datetime(2024, 2, 1, 17, 0)
        assert updated.status == "checkOut"
        assert updated.check_in == datetime(2024, 2, 1, 8, 30)

    def test_update_rejects_unknown_status(self, attendance_service, records):
        with pytest.raises(ValidationError) as exc_info:
            attendance_service.update_attendance(records[1].id, {"status": "present"})

        assert exc_info.value.field == "status"

    def test_update_rejects_null_date(self, attendance_service, records):
        with pytest.raises(ValidationError, match="date cannot be null"):
            attendance_service.update_attendance(records[1].id, {"date": None})

    def test_update_unknown(self, attendance_service):
        with pytest.raises(NotFoundError):
            attendance_service.update_attendance(999, {"status": "checkIn"})

    def test_update_onto_taken_day_is_rejected(self, attendance_service, records):
        with pytest.raises(ValidationError, match="attendance already exists for this teacher and date") as exc_info:
            attendance_service.update_attendance(records[1].id, {"date": "2024-02-29"})

        assert exc_info.value.field == "date"
        assert exc_info.value.identifier == records[1].id
        assert attendance_service.get_attendance(records[1].id).date == date(2024, 2, 1)
