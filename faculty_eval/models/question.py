from sqlalchemy import String, Integer, Float, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from faculty_eval.db.base import Base


class Question(Base):
    __tablename__ = "questions"
    __table_args__ = (
        UniqueConstraint("category_id", "text", name="uq_questions_category_text"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    text: Mapped[str] = mapped_column(String(300), nullable=False)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)

    category = relationship("Category", back_populates="questions", lazy="joined")
