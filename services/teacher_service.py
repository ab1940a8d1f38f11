import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from core.exceptions import NotFoundError, ValidationError
from core.metrics import Metrics, metrics as default_metrics
from models.teachers import Teacher as TeacherModel
from repositories.teachers import TeacherRepository
from schemas.teachers import TeacherCreate

logger = logging.getLogger(__name__)

TeacherPayload = Union[TeacherCreate, Mapping[str, Any]]


def validate_teacher(payload: TeacherPayload, *, prefix: str = "") -> TeacherCreate:
    """Coerce a mapping into TeacherCreate, turning pydantic errors into ValidationError."""
    if isinstance(payload, TeacherCreate):
        return payload
    try:
        return TeacherCreate.model_validate(payload)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = prefix + ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"{field}: {first['msg']}", field=field) from exc


class TeacherService:
    def __init__(self, teachers: TeacherRepository, metrics: Metrics = default_metrics):
        self._teachers = teachers
        self._metrics = metrics

    def create_teacher(self, payload: TeacherPayload) -> TeacherModel:
        data = validate_teacher(payload)
        teacher = self._teachers.create(data.model_dump())
        self._metrics.teachers_created_total.inc()
        self._metrics.teachers_total.inc()
        logger.info(f"Teacher created: id={teacher.id}")
        return teacher

    def create_teachers(self, payloads: Sequence[TeacherPayload]) -> List[TeacherModel]:
        if not payloads:
            raise ValidationError("teacher list cannot be empty", field="teachers")

        rows = [
            validate_teacher(payload, prefix=f"[{index}].").model_dump()
            for index, payload in enumerate(payloads)
        ]
        teachers = self._teachers.bulk_create(rows)
        self._metrics.teachers_created_total.inc(len(teachers))
        self._metrics.teachers_total.inc(len(teachers))
        logger.info(f"Bulk created {len(teachers)} teachers")
        return teachers

    def get_teacher(self, teacher_id: int) -> TeacherModel:
        teacher = self._teachers.get_by_id(teacher_id)
        if teacher is None:
            logger.info(f"Teacher not found: id={teacher_id}")
            raise NotFoundError("Teacher not found", identifier=teacher_id)
        return teacher

    def update_teacher(self, teacher_id: int, payload: TeacherPayload) -> TeacherModel:
        data = validate_teacher(payload)
        teacher = self.get_teacher(teacher_id)
        # PUT semantics: every mutable field is overwritten
        return self._teachers.update(teacher, data.model_dump())

    def search_teachers(self, q: Optional[str] = None, subject: Optional[str] = None) -> List[TeacherModel]:
        q = q.strip() if q else None
        subject = subject.strip() if subject else None
        return self._teachers.search(q=q or None, subject=subject or None)

    def sync_total(self) -> int:
        """Seed the teachers_total gauge from the table."""
        total = self._teachers.count()
        self._metrics.teachers_total.set(total)
        return total
