from .repository import AttendanceStore

__all__ = ["AttendanceStore"]
