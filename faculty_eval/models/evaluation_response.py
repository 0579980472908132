from sqlalchemy import Float, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from faculty_eval.db.base import Base


class EvaluationResponse(Base):
    __tablename__ = "evaluation_responses"
    __table_args__ = (
        UniqueConstraint("evaluation_id", "question_id", name="uq_eval_question"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    evaluation_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("evaluations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("questions.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    rating: Mapped[float] = mapped_column(Float, nullable=False)

    evaluation = relationship("Evaluation", back_populates="responses")
