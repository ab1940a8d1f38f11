from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from core.metrics import metrics
from dependencies.db import get_db
from repositories.attendance import AttendanceRepository
from repositories.teachers import TeacherRepository
from services.attendance_service import AttendanceService
from services.teacher_service import TeacherService

DbSession = Annotated[Session, Depends(get_db)]


def get_teacher_service(db: DbSession) -> TeacherService:
    return TeacherService(TeacherRepository(db), metrics)


def get_attendance_service(db: DbSession) -> AttendanceService:
    return AttendanceService(AttendanceRepository(db), TeacherRepository(db), metrics)


TeacherServiceDep = Annotated[TeacherService, Depends(get_teacher_service)]
AttendanceServiceDep = Annotated[AttendanceService, Depends(get_attendance_service)]
