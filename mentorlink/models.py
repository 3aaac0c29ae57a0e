# mentorlink/models.py
import uuid
from enum import Enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Float, Boolean, ForeignKey, CheckConstraint, UniqueConstraint, Index, text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .database import Base

def new_id() -> str:
    return str(uuid.uuid4())

class CommunicationPreference(str, Enum):
    EMAIL = "EMAIL"
    SMS = "SMS"

# PENDING - request sent to the mentor, not yet answered
# ACTIVE - mentorship is ongoing
# REJECTED - mentor declined the request
# ARCHIVED - mentorship has ended, must have been ACTIVE at one point
class MentorshipState(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    ARCHIVED = "ARCHIVED"
    REJECTED = "REJECTED"

    def can_transition_to(self, target: "MentorshipState") -> bool:
        return target in ALLOWED_TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]

ALLOWED_TRANSITIONS = {
    MentorshipState.PENDING: frozenset({MentorshipState.ACTIVE, MentorshipState.REJECTED}),
    MentorshipState.ACTIVE: frozenset({MentorshipState.ARCHIVED}),
    MentorshipState.ARCHIVED: frozenset(),
    MentorshipState.REJECTED: frozenset(),
}

def _enum_column(enum_class, name):
    return SAEnum(enum_class, name=name, native_enum=False, values_callable=lambda obj: [e.value for e in obj])


class Mentor(Base):
    __tablename__ = "mentors"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False)
    phone = Column(String, nullable=True)
    pronouns = Column(String, nullable=True)
    college = Column(String, nullable=False)
    major = Column(String, nullable=False)
    region = Column(String, nullable=True)
    introduction = Column(Text, nullable=True)
    communication_preference = Column(
        _enum_column(CommunicationPreference, "communication_preference"),
        nullable=False,
        default=CommunicationPreference.EMAIL,
    )
    available = Column(Boolean, nullable=False, default=False)
    last_request_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Mentor(id={self.id}, name='{self.name}')>"

class Parent(Base):
    __tablename__ = "parents"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False)
    phone = Column(String, nullable=True)
    region = Column(String, nullable=True)
    communication_preference = Column(
        _enum_column(CommunicationPreference, "communication_preference"),
        nullable=False,
        default=CommunicationPreference.EMAIL,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # The roster is always needed to resolve a student from a bare id
    students = relationship("Student", back_populates="parent", lazy="selectin", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Parent(id={self.id}, name='{self.name}', students={len(self.students)})>"

class Student(Base):
    __tablename__ = "students"

    id = Column(String(36), primary_key=True, default=new_id)
    parent_id = Column(String(36), ForeignKey("parents.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    grade_level = Column(String, nullable=False)

    parent = relationship("Parent", back_populates="students")

    def __repr__(self):
        return f"<Student(id={self.id}, parent_id={self.parent_id}, name='{self.name}')>"

class Mentorship(Base):
    """Links a mentor, a parent and one of the parent's students through a lifecycle state.

    Rows are never deleted by lifecycle transitions so engagement history is kept.
    ``start_date`` is set iff the state is ACTIVE or ARCHIVED, ``end_date`` iff ARCHIVED.
    """
    __tablename__ = "mentorships"

    id = Column(String(36), primary_key=True, default=new_id)
    state = Column(_enum_column(MentorshipState, "mentorship_state"), nullable=False, default=MentorshipState.PENDING, index=True)
    message = Column(Text, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Deleting a user leaves the reference dangling; reads clean these up
    mentor_id = Column(String(36), ForeignKey("mentors.id", ondelete="SET NULL"), nullable=True, index=True)
    parent_id = Column(String(36), ForeignKey("parents.id", ondelete="SET NULL"), nullable=True, index=True)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="SET NULL"), nullable=True, index=True)

    mentor = relationship("Mentor")
    parent = relationship("Parent")
    student = relationship("Student")
    sessions = relationship(
        "MentorshipSession",
        back_populates="mentorship",
        order_by="MentorshipSession.position",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        # A student has at most one ACTIVE mentorship
        Index(
            "uq_mentorships_one_active_per_student",
            "student_id",
            unique=True,
            postgresql_where=text("state = 'ACTIVE'"),
            sqlite_where=text("state = 'ACTIVE'"),
        ),
    )

    def __repr__(self):
        return f"<Mentorship(id={self.id}, mentor_id={self.mentor_id}, student_id={self.student_id}, state='{self.state}')>"

class MentorshipSession(Base):
    __tablename__ = "mentorship_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    mentorship_id = Column(String(36), ForeignKey("mentorships.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    rating = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)
    held_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    mentorship = relationship("Mentorship", back_populates="sessions")

    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 1", name="ck_session_rating_range"),
        UniqueConstraint("mentorship_id", "position", name="uq_session_position"),
    )

    def __repr__(self):
        return f"<MentorshipSession(id={self.id}, mentorship_id={self.mentorship_id}, position={self.position}, rating={self.rating})>"
