"""
SQLAlchemy models for the MindEase backend.
Tables: users, assessments, todo_tasks, volunteers, admins.
"""
import enum
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class TaskCategory(str, enum.Enum):
    """To-do task categories, with the label shown to users."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    SOCIAL = "SOCIAL"
    SELF_CARE = "SELF_CARE"
    PROFESSIONAL = "PROFESSIONAL"

    @property
    def display(self) -> str:
        return CATEGORY_DISPLAY[self]


CATEGORY_DISPLAY = {
    TaskCategory.DAILY: "Daily Tasks",
    TaskCategory.WEEKLY: "Weekly Goals",
    TaskCategory.MONTHLY: "Monthly Goals",
    TaskCategory.QUARTERLY: "Quarterly Goals",
    TaskCategory.SOCIAL: "Social Connections",
    TaskCategory.SELF_CARE: "Self-Care Activities",
    TaskCategory.PROFESSIONAL: "Professional Support",
}


def _isoformat(value):
    return value.isoformat() if value else None


class User(Base):
    """
    Model for users. Owns assessments and to-do tasks.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    recommendations = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    assessments = relationship(
        "Assessment",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    todo_tasks = relationship(
        "TodoTask",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "username": self.username,
            "created_at": _isoformat(self.created_at),
            "assessment_count": len(self.assessments),
            "todo_task_count": len(self.todo_tasks),
        }
        # Location is only reported when both coordinates are known
        if self.latitude is not None and self.longitude is not None:
            data["latitude"] = self.latitude
            data["longitude"] = self.longitude
        return data


class Assessment(Base):
    """
    Model for a scored self-assessment (e.g. PHQ-9, GAD-7).
    """
    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    assessment_type = Column(String(50), nullable=False)
    score = Column(Integer, nullable=False)
    risk_level = Column(String(100), nullable=True)
    follow_up_date = Column(Date, nullable=True)
    suggestions = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    user = relationship("User", back_populates="assessments")

    __table_args__ = (
        Index('ix_assessments_user_created', 'user_id', 'created_at'),
    )

    def __repr__(self) -> str:
        return f"<Assessment(id={self.id}, user_id={self.user_id}, type={self.assessment_type})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "assessment_type": self.assessment_type,
            "score": self.score,
            "risk_level": self.risk_level,
            "follow_up_date": _isoformat(self.follow_up_date),
            "suggestions": self.suggestions,
            "created_at": _isoformat(self.created_at),
        }


class TodoTask(Base):
    """
    Model for to-do tasks. Recurring tasks form a series of instances
    sharing text, category, pattern and source assessment.
    """
    __tablename__ = "todo_tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    task = Column(Text, nullable=False)
    category = Column(
        Enum(TaskCategory, native_enum=False, length=20),
        nullable=False
    )
    completed = Column(Boolean, default=False, nullable=False)
    scheduled_date = Column(DateTime, nullable=False)
    source_assessment_id = Column(Integer, nullable=True)
    recurring = Column(Boolean, default=False, nullable=False)
    recurrence_pattern = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    user = relationship("User", back_populates="todo_tasks")

    __table_args__ = (
        Index('ix_todo_tasks_user_scheduled', 'user_id', 'scheduled_date'),
        Index('ix_todo_tasks_user_recurring', 'user_id', 'recurring'),
    )

    def __repr__(self) -> str:
        return f"<TodoTask(id={self.id}, user_id={self.user_id}, category={self.category})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "task": self.task,
            "category": self.category.value if self.category else None,
            "category_display": self.category.display if self.category else None,
            "completed": self.completed,
            "scheduled_date": _isoformat(self.scheduled_date),
            "source_assessment_id": self.source_assessment_id,
            "recurring": self.recurring,
            "recurrence_pattern": self.recurrence_pattern,
            "created_at": _isoformat(self.created_at),
        }


class Volunteer(Base):
    """
    Model for volunteers. Accounts start unapproved and inactive.
    """
    __tablename__ = "volunteers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(120), nullable=False)
    credentials = Column(String(255), nullable=True)
    specialization = Column(String(255), nullable=True)
    experience = Column(Integer, nullable=True)
    certificate_image = Column(Text, nullable=True)
    id_proof_image = Column(Text, nullable=True)
    approved = Column(Boolean, default=False, nullable=False)
    active = Column(Boolean, default=False, nullable=False)
    rejection_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    def __repr__(self) -> str:
        return f"<Volunteer(id={self.id}, username={self.username}, approved={self.approved})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "full_name": self.full_name,
            "credentials": self.credentials,
            "specialization": self.specialization,
            "experience": self.experience,
            "approved": self.approved,
            "active": self.active,
            "rejection_reason": self.rejection_reason,
            "created_at": _isoformat(self.created_at),
        }


class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    full_name = Column(String(120), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, username={self.username})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "email": self.email,
        }
