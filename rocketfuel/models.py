from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rocketfuel.database import Base

# 64-bit identifiers; SQLite only autoincrements an INTEGER primary key.
Id = BigInteger().with_variant(Integer, "sqlite")

# ---------------------------------------------------------------------------
# Association table: Question <-> Tag (many-to-many)
# ---------------------------------------------------------------------------
question_tag = Table(
    "question_tag",
    Base.metadata,
    Column("question_id", Id, ForeignKey("question.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Id, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)


# ---------------------------------------------------------------------------
# User (owned by the user directory; read-only here)
# ---------------------------------------------------------------------------
class User(Base):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)


# ---------------------------------------------------------------------------
# Tag
# ---------------------------------------------------------------------------
class Tag(Base):
    __tablename__ = "tag"

    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)

    questions: Mapped[List["Question"]] = relationship(
        "Question", secondary=question_tag, back_populates="tags", lazy="noload"
    )


# ---------------------------------------------------------------------------
# Question
# ---------------------------------------------------------------------------
class Question(Base):
    __tablename__ = "question"

    __table_args__ = (
        # Latest-questions feed
        Index("ix_question_created_at", "created_at"),
    )
    # Read created_at back on insert so the 201 response carries it.
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Id, ForeignKey("user.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    votes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    answered: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    slack_thread_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, unique=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # lazy="noload" keeps every load explicit in the data layer
    answers: Mapped[List["Answer"]] = relationship(
        "Answer", back_populates="question_row", lazy="noload"
    )
    tags: Mapped[List["Tag"]] = relationship(
        "Tag", secondary=question_tag, back_populates="questions", lazy="noload"
    )


# ---------------------------------------------------------------------------
# Answer
# ---------------------------------------------------------------------------
class Answer(Base):
    __tablename__ = "answer"

    __table_args__ = (
        Index("ix_answer_question_id_created_at", "question_id", "created_at"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Id, ForeignKey("user.id"), nullable=False)
    question_id: Mapped[int] = mapped_column(
        Id, ForeignKey("question.id"), nullable=False
    )
    title: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    votes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    accepted: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    slack_thread_id: Mapped[Optional[str]] = mapped_column(
        String(64), nullable=True, unique=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    question_row: Mapped["Question"] = relationship(
        "Question", back_populates="answers", lazy="noload"
    )
