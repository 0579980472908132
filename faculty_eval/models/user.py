from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, ForeignKey, Integer, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
import sqlalchemy as sa

from faculty_eval.db.base import Base

USER_TYPES = ("Admin", "User")
USER_ROLES = ("Faculty", "Student", "Supervisor")


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("user_type IN ('Admin','User')", name="ck_users_user_type"),
        CheckConstraint(
            "role IS NULL OR role IN ('Faculty','Student','Supervisor')",
            name="ck_users_role",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_initial: Mapped[str | None] = mapped_column(String(1), nullable=True)

    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    user_type: Mapped[str] = mapped_column(String(20), nullable=False, default="User")
    # Only set for user_type == 'User'
    role: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)

    department_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now(), nullable=False
    )

    department = relationship("Department", lazy="joined")

    @property
    def is_admin(self) -> bool:
        return self.user_type == "Admin"

    @property
    def full_name(self) -> str:
        parts = [self.first_name, f"{self.middle_initial}." if self.middle_initial else None, self.last_name]
        return " ".join(p for p in parts if p)
