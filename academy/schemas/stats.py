from pydantic import BaseModel


class AdminStats(BaseModel):
    total_users: int
    total_students: int
    total_teachers: int
    total_admins: int
    active_users: int
    total_classes: int
    active_classes: int
    total_programs: int


class TeacherStats(BaseModel):
    total_classes: int
    active_classes: int
    total_students: int
    upcoming_sessions: int
