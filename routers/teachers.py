from typing import List, Optional

from fastapi import APIRouter, Query

from dependencies.services import TeacherServiceDep
from schemas.common import ERROR_RESPONSES
from schemas.teachers import BulkCreateResponse, Teacher, TeacherCreate

router = APIRouter(prefix="/teachers", tags=["teachers"], responses=ERROR_RESPONSES)


# ==========================================================
# CRUD
# ==========================================================

# create one teacher
@router.post("", response_model=Teacher, status_code=201, summary="Create teacher")
def create_teacher(teacher: TeacherCreate, service: TeacherServiceDep):
    return service.create_teacher(teacher)


# search across first name, last name, email, subject
@router.get("", response_model=List[Teacher], summary="Search teachers")
def search_teachers(
    service: TeacherServiceDep,
    q: Optional[str] = Query(default=None, description="Search keyword (first name, last name, email, subject)"),
    subject: Optional[str] = Query(default=None, description="Subject filter"),
):
    return service.search_teachers(q=q, subject=subject)


# create many teachers in one commit
@router.post("/bulk", response_model=BulkCreateResponse, status_code=201, summary="Create multiple teachers")
def create_teachers(teachers: List[TeacherCreate], service: TeacherServiceDep):
    created = service.create_teachers(teachers)
    return BulkCreateResponse(message="Teachers created successfully", count=len(created))


@router.get("/{teacher_id}", response_model=Teacher, summary="Get teacher by ID")
def read_teacher(teacher_id: int, service: TeacherServiceDep):
    return service.get_teacher(teacher_id)


@router.put("/{teacher_id}", response_model=Teacher, summary="Update teacher")
def update_teacher(teacher_id: int, updated: TeacherCreate, service: TeacherServiceDep):
    return service.update_teacher(teacher_id, updated)
