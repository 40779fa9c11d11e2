from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every wire model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Principal ---

class Auth(CamelModel):
    user_id: int


# --- User ---

class User(CamelModel):
    id: int
    name: str
    email: str


# --- Question ---

class QuestionCreate(CamelModel):
    title: str = Field(min_length=1, max_length=300)
    question: str = Field(min_length=1)
    slack_thread_id: str | None = Field(None, max_length=64)
    tags: list[str] = []


class Question(CamelModel):
    id: int | None = None
    user_id: int | None = None
    title: str
    question: str
    votes: int = 0
    answered: bool = False
    slack_thread_id: str | None = None
    created_at: datetime | None = None
    tags: list[str] = []


# --- Answer ---

class AnswerCreate(CamelModel):
    title: str | None = Field(None, max_length=300)
    # Presence is checked by the service so a blank body maps to answer.required.
    answer: str | None = None
    slack_thread_id: str | None = Field(None, max_length=64)


class Answer(CamelModel):
    id: int | None = None
    user_id: int | None = None
    question_id: int | None = None
    title: str | None = None
    answer: str
    votes: int = 0
    accepted: bool = False
    slack_thread_id: str | None = None
    created_at: datetime | None = None
    created_by: str | None = None
    # Parent question, loaded for ownership checks only.
    question: Question | None = Field(None, exclude=True)


# --- Data layer ---

class GeneratedKey(BaseModel):
    key: int
    # Server-assigned insert time, read back with the key.
    created_at: datetime | None = None
