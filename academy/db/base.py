# Import all models here so Base.metadata sees every table (used by init_db and alembic)
from academy.db.base_class import Base  # noqa: F401
from academy.models.academy_class import AcademyClass  # noqa: F401
from academy.models.audit_log import AuditLog  # noqa: F401
from academy.models.class_member import ClassMember  # noqa: F401
from academy.models.class_teacher import ClassTeacher  # noqa: F401
from academy.models.program import Program  # noqa: F401
from academy.models.training_session import TrainingSession  # noqa: F401
from academy.models.user import User  # noqa: F401
