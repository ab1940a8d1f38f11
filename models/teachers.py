from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from database.db import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)                    # teacher id (PK)
    first_name = Column(String(100), nullable=False)                      # first name
    last_name = Column(String(100), nullable=False)                       # last name
    email = Column(String(255), nullable=False)                           # email
    subject = Column(String(100))                                         # subject taught
    phone = Column(String(30))                                            # phone number
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    # attendance rows of this teacher (1:N)
    attendances = relationship("Attendance", back_populates="teacher")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
