from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.enums import AttendanceStatus
from schemas.teachers import Teacher

DISPLAY_DATE_FORMAT = "%d-%m-%Y"


# input schema for POST /attendance (check-in / check-out)
class AttendanceRequest(BaseModel):
    teacher_id: int
    status: str                                # checkIn / checkOut, checked by the service


# partial update for PUT /attendance/{id}
class AttendanceUpdate(BaseModel):
    teacher_id: Optional[int] = None
    date: Optional[date_type] = None
    status: Optional[AttendanceStatus] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None


class Attendance(BaseModel):
    id: int
    teacher_id: int
    date: date_type
    status: str
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    teacher: Optional[Teacher] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AttendanceDTO(BaseModel):
    """Display projection: denormalized teacher name and a DD-MM-YYYY date."""

    teacher_id: int = Field(alias="teacherId")
    teacher_name: str = Field(alias="teacherName")
    check_in: Optional[datetime] = Field(default=None, alias="checkIn")
    check_out: Optional[datetime] = Field(default=None, alias="checkOut")
    date: str

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_record(cls, record) -> "AttendanceDTO":
        return cls(
            teacher_id=record.teacher.id,
            teacher_name=record.teacher.full_name,
            check_in=record.check_in,
            check_out=record.check_out,
            date=record.date.strftime(DISPLAY_DATE_FORMAT),
        )


class AttendanceReport(BaseModel):
    attendance_list: List[AttendanceDTO] = Field(default_factory=list, alias="attendanceList")

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str
