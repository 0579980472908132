from sqlalchemy import String, Integer, Float
from sqlalchemy.orm import Mapped, mapped_column, relationship

from faculty_eval.db.base import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    # multiplier for the category mean when computing overall scores (NULL counts as 1)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)

    questions = relationship(
        "Question",
        back_populates="category",
        order_by="Question.id",
        lazy="selectin",
    )
