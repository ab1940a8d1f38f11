from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


# input schema: create / full update (POST, PUT)
class TeacherCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)   # first name
    last_name: str = Field(..., min_length=1, max_length=100)    # last name
    email: EmailStr                                              # email address
    subject: Optional[str] = Field(default=None, max_length=100) # subject taught
    phone: Optional[str] = Field(default=None, max_length=30)    # phone number

    model_config = ConfigDict(str_strip_whitespace=True)


# output schema (GET responses etc.)
class Teacher(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    subject: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)  # build straight from SQLAlchemy rows


class BulkCreateResponse(BaseModel):
    message: str
    count: int
