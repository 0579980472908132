from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from faculty_eval.db.base import Base


class Evaluation(Base):
    __tablename__ = "evaluations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    evaluator_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    evaluatee_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    course_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("courses.id", ondelete="SET NULL"), nullable=True
    )
    form_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("evaluation_forms.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # weighted category mean, written back after the responses are stored
    overall_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    date_submitted: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=sa.func.now()
    )

    responses = relationship(
        "EvaluationResponse",
        back_populates="evaluation",
        cascade="all, delete-orphan",
        order_by="EvaluationResponse.question_id",
        lazy="selectin",
    )
