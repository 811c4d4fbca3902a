from attendance.stores.interfaces import AttendanceStore
from attendance.stores.memory_store import InMemoryAttendanceStore

__all__ = ["AttendanceStore", "InMemoryAttendanceStore"]
