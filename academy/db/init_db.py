from academy.db.base import Base
from academy.db.session import engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
