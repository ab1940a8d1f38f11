from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base


class Attendance(Base):
    __tablename__ = "attendance"  # daily check-in / check-out records

    id = Column(Integer, primary_key=True, index=True)                             # attendance id (PK)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)                                            # calendar day
    status = Column(String(20), nullable=False)                                    # checkIn / checkOut
    check_in = Column(DateTime, nullable=True)
    check_out = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # owning teacher (N:1)
    teacher = relationship("Teacher", back_populates="attendances")

    # one row per teacher per day
    __table_args__ = (
        UniqueConstraint("teacher_id", "date", name="uq_attendance_teacher_date"),
    )
