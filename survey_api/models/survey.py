"""Pydantic models for survey payloads.

Read models mirror the `groups` and `questions` tables; translation fields are
optional and only populated for the bilingual schema variant, so responses
are serialized with `exclude_none`. Write models describe the body of
`POST /save-answers`.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AliasChoices, BaseModel, Field

# Submitted ids land in INTEGER columns; JSON strings and floats are refused
StoreInt = Annotated[int, Field(strict=True, ge=-(2**31), le=2**31 - 1)]


class Question(BaseModel):
    id: int
    group_id: int
    question: str
    question_en: str | None = None


class Group(BaseModel):
    id: int
    name: str
    name_en: str | None = None


class GroupWithQuestions(Group):
    questions: list[Question] = Field(default_factory=list)


class QuestionsResponse(BaseModel):
    groups: list[GroupWithQuestions] = Field(default_factory=list)


class AnswerChoice(BaseModel):
    id: StoreInt
    value: str = ""


class AnswerSubmission(BaseModel):
    # The deployed front end sends `id_question`
    question_id: StoreInt = Field(
        validation_alias=AliasChoices("id_question", "question_id"),
        serialization_alias="id_question",
    )
    answer: AnswerChoice
    full_name: str
    email: str
    role: str
    what_role: str = ""


class SaveAnswersRequest(BaseModel):
    answers: list[AnswerSubmission]


class SaveAnswersResponse(BaseModel):
    status: str = "answers saved"


class HealthResponse(BaseModel):
    message: str = "Health check passed"


class ErrorResponse(BaseModel):
    error: str


__all__ = [
    "AnswerChoice",
    "AnswerSubmission",
    "ErrorResponse",
    "Group",
    "GroupWithQuestions",
    "HealthResponse",
    "Question",
    "QuestionsResponse",
    "SaveAnswersRequest",
    "SaveAnswersResponse",
]
