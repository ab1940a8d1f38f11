from typing import Iterable, List, Optional

from sqlalchemy import func, or_

from models.teachers import Teacher as TeacherModel
from repositories.base import SessionRepository


class TeacherRepository(SessionRepository):
    def create(self, values: dict) -> TeacherModel:
        with self.guard("create teacher") as db:
            teacher = TeacherModel(**values)
            db.add(teacher)
            db.commit()
            db.refresh(teacher)
            return teacher

    def bulk_create(self, rows: Iterable[dict]) -> List[TeacherModel]:
        """Insert every row in one session and commit once: all or nothing."""
        with self.guard("bulk create teachers") as db:
            teachers = [TeacherModel(**values) for values in rows]
            db.add_all(teachers)
            db.commit()
            for teacher in teachers:
                db.refresh(teacher)
            return teachers

    def update(self, teacher: TeacherModel, values: dict) -> TeacherModel:
        with self.guard("update teacher") as db:
            for key, value in values.items():
                setattr(teacher, key, value)
            db.commit()
            db.refresh(teacher)
            return teacher

    def get_by_id(self, teacher_id: int) -> Optional[TeacherModel]:
        with self.guard("get teacher") as db:
            return db.get(TeacherModel, teacher_id)

    def search(self, q: Optional[str] = None, subject: Optional[str] = None) -> List[TeacherModel]:
        """
        - q: case-insensitive substring, matched against first name, last name, email or subject
        - subject: case-insensitive substring on subject only
        % and _ in either are matched literally.
        Both are optional; when both are given a row must satisfy both.
        """
        with self.guard("search teachers") as db:
            query = db.query(TeacherModel)
            if q:
                query = query.filter(
                    or_(
                        TeacherModel.first_name.icontains(q, autoescape=True),
                        TeacherModel.last_name.icontains(q, autoescape=True),
                        TeacherModel.email.icontains(q, autoescape=True),
                        TeacherModel.subject.icontains(q, autoescape=True),
                    )
                )
            if subject:
                query = query.filter(TeacherModel.subject.icontains(subject, autoescape=True))
            return query.order_by(TeacherModel.id).all()

    def count(self) -> int:
        with self.guard("count teachers") as db:
            return db.query(func.count(TeacherModel.id)).scalar() or 0
