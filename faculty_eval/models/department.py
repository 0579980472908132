from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from faculty_eval.db.base import Base


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
