from typing import List, Optional

from fastapi import APIRouter, Query, Response

from core.enums import AttendanceStatus
from core.exceptions import ValidationError
from dependencies.services import AttendanceServiceDep
from schemas.attendance import (
    Attendance,
    AttendanceDTO,
    AttendanceReport,
    AttendanceRequest,
    AttendanceUpdate,
    MessageResponse,
)
from schemas.common import ERROR_RESPONSES

router = APIRouter(tags=["attendance"], responses=ERROR_RESPONSES)

SUCCESS_MESSAGES = {
    AttendanceStatus.CHECK_IN: "You have checked in successfully",
    AttendanceStatus.CHECK_OUT: "You have checked out successfully",
}


# ==========================================================
# check-in / check-out
# ==========================================================

@router.post(
    "/attendance",
    response_model=MessageResponse,
    status_code=201,
    summary="Mark attendance",
    description="checkIn creates today's record, checkOut completes it (teacher_id and status are mandatory)",
)
def mark_attendance(attendance: AttendanceRequest, service: AttendanceServiceDep):
    service.mark_attendance(attendance.teacher_id, attendance.status)
    return MessageResponse(message=SUCCESS_MESSAGES[AttendanceStatus(attendance.status)])


# ==========================================================
# CRUD
# ==========================================================

@router.get("/attendance", response_model=List[AttendanceDTO], summary="Get all attendance records")
def read_attendance_list(service: AttendanceServiceDep):
    return service.list_attendance()


@router.get("/attendance/{attendance_id}", response_model=Attendance, summary="Get attendance by ID")
def read_attendance(attendance_id: int, service: AttendanceServiceDep):
    return service.get_attendance(attendance_id)


@router.put("/attendance/{attendance_id}", response_model=Attendance, summary="Update attendance")
def update_attendance(attendance_id: int, updated: AttendanceUpdate, service: AttendanceServiceDep):
    return service.update_attendance(attendance_id, updated)


@router.delete("/attendance/{attendance_id}", status_code=204, response_class=Response, summary="Delete attendance")
def delete_attendance(attendance_id: int, service: AttendanceServiceDep):
    service.delete_attendance(attendance_id)
    return Response(status_code=204)


# ==========================================================
# reports
# ==========================================================

@router.get(
    "/attendanceByDate",
    response_model=AttendanceReport,
    summary="Get attendance by teacher",
    description="Attendance of one teacher for a month, defaulting to the current month and year",
)
def attendance_by_teacher(
    service: AttendanceServiceDep,
    teacher_id: Optional[int] = Query(default=None, alias="teacherId", description="Teacher ID"),
    month: Optional[int] = Query(default=None, description="Month (1-12), default current month"),
    year: Optional[int] = Query(default=None, description="Year, default current year"),
):
    if teacher_id is None:
        raise ValidationError("teacherId is required", field="teacherId")
    return service.attendance_by_teacher_month(teacher_id, month, year)


@router.get(
    "/attendanceByFilterDate",
    response_model=AttendanceReport,
    summary="Get attendance for a date",
    description="Attendance of every teacher on one day; each part defaults to today",
)
def attendance_by_filter_date(
    service: AttendanceServiceDep,
    day: Optional[int] = Query(default=None, alias="date", description="Day of month (1-31)"),
    month: Optional[int] = Query(default=None, description="Month (1-12)"),
    year: Optional[int] = Query(default=None, description="Year (YYYY)"),
):
    return service.attendance_by_day(day, month, year)
