from enum import Enum


class AttendanceStatus(str, Enum):
    CHECK_IN = "checkIn"
    CHECK_OUT = "checkOut"
