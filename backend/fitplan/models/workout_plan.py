from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, String, Text, DateTime, func
from fitplan.db import Base

class WorkoutPlan(Base):
    __tablename__ = "workout_plans"
    # ids are assigned by the generation pipeline, never by the database
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="plans")
    workouts = relationship("Workout", back_populates="plan", cascade="all, delete-orphan",
                            order_by="Workout.position")
