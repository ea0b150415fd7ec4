from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


DIFFICULTIES = ("basic", "intermediate", "advanced")
DEFAULT_DIFFICULTY = "intermediate"

_DIFFICULTY_ALIASES = {
    "beginner": "basic",
    "easy": "basic",
    "medium": "intermediate",
    "hard": "advanced",
    "expert": "advanced",
}


class ContentFormat(str, Enum):
    ROADMAP = "roadmap"
    LECTURE = "lecture"
    QUIZ = "quiz"
    CODING = "coding-exercise"
    RECOMMENDED_TOPICS = "recommended-topics"


def normalize_difficulty(value: Any) -> str:
    text = str(value or "").strip().lower()
    text = _DIFFICULTY_ALIASES.get(text, text)
    return text if text in DIFFICULTIES else DEFAULT_DIFFICULTY


def coerce_str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    items: list[str] = []
    for item in value:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            items.append(text)
    return items


class LenientModel(BaseModel):
    """Model fed from LLM output: unknown keys are ignored and nulls fall back to defaults."""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class LearnerProfile(BaseModel):
    age: str | int = "25"
    experience: str = "intermediate"
    interests: list[str] = Field(default_factory=lambda: ["programming", "web development", "AI"])
    goals: list[str] = Field(default_factory=lambda: ["learn new skills", "career growth"])
    learningStyle: str = "visual"
    displayName: str = ""


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str
    difficulty: str = DEFAULT_DIFFICULTY
    format: ContentFormat
    modular: bool = False
    count: int = Field(default=1, ge=1, le=5)
    profile: LearnerProfile | None = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value: Any) -> str:
        return normalize_difficulty(value)


class RawCompletion(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    received_at: datetime


class Resource(LenientModel):
    title: str = ""
    url: str = ""
    type: str = ""
    description: str = ""


class LectureSection(LenientModel):
    title: str = ""
    content: str = ""
    keyPoints: list[str] = Field(default_factory=list)
    codeExample: str = ""
    note: str = ""
    tips: list[str] = Field(default_factory=list)

    @field_validator("keyPoints", "tips", mode="before")
    @classmethod
    def _string_lists(cls, value: Any) -> list[str]:
        return coerce_str_list(value)


class LectureModule(LenientModel):
    title: str = ""
    content: str = ""
    sections: list[LectureSection] = Field(default_factory=list)
    summary: str = ""


class Lecture(LenientModel):
    title: str = ""
    introduction: str = ""
    description: str = ""
    sections: list[LectureSection] = Field(default_factory=list)
    modules: list[LectureModule] = Field(default_factory=list)
    content: str = ""
    keywords: list[str] = Field(default_factory=list)
    estimatedTime: str = ""
    difficulty: str = ""
    summary: str = ""
    resources: list[Resource] = Field(default_factory=list)

    @field_validator("keywords", mode="before")
    @classmethod
    def _keywords(cls, value: Any) -> list[str]:
        return coerce_str_list(value)


class QuizExercise(BaseModel):
    type: Literal["quiz"] = "quiz"
    question: str
    options: list[str]
    correctAnswer: int
    explanation: str
    difficulty: str


class CodingExercise(BaseModel):
    type: Literal["coding"] = "coding"
    prompt: str
    starterCode: str
    solution: str
    hints: list[str]
    difficulty: str


class RecommendedTopic(BaseModel):
    title: str
    description: str
    duration: str


class LectureContent(BaseModel):
    format: Literal["lecture"] = "lecture"
    modular: bool = False
    lecture: Lecture


class QuizSet(BaseModel):
    format: Literal["quiz"] = "quiz"
    items: list[QuizExercise]


class CodingSet(BaseModel):
    format: Literal["coding-exercise"] = "coding-exercise"
    items: list[CodingExercise]


class RoadmapContent(BaseModel):
    format: Literal["roadmap"] = "roadmap"
    steps: list[str]


class TopicRecommendations(BaseModel):
    format: Literal["recommended-topics"] = "recommended-topics"
    topics: list[RecommendedTopic]


NormalizedContent = Annotated[
    Union[LectureContent, QuizSet, CodingSet, RoadmapContent, TopicRecommendations],
    Field(discriminator="format"),
]
