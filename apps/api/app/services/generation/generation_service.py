from functools import lru_cache
import logging
from typing import Any, Callable

from fastapi import HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.core.config import get_settings
from app.domain.ai import CompletionClient, build_completion_client
from app.domain.ai.errors import ConfigError, UpstreamError, UpstreamExhausted
from app.domain.content.models import (
    CodingSet,
    ContentFormat,
    GenerationRequest,
    LearnerProfile,
    Lecture,
    LectureContent,
    NormalizedContent,
    QuizSet,
    RawCompletion,
    RoadmapContent,
    TopicRecommendations,
)
from app.services.generation.error_policy import build_structured_error_detail, format_failure_detail
from app.services.generation.fallback import (
    enrich_lecture,
    fallback_coding_items,
    fallback_content,
    fallback_quiz_items,
)
from app.services.generation.normalizer import parse_json_payload, parse_roadmap_steps
from app.services.generation.pipeline_runtime import (
    GenerationOutcome,
    PipelineError,
    Stage,
    StageResult,
    parse_failure,
    run_with_fallback,
    validation_failure,
)
from app.services.generation.prompts import build_chat_prompt, build_prompt
from app.services.generation.validator import (
    repair_coding_item,
    repair_quiz_item,
    repair_recommended_topic,
    validate_content,
)


logger = logging.getLogger(__name__)
settings = get_settings()

DEFAULT_QUIZ_COUNT = 3
DEFAULT_CODING_COUNT = 2
MAX_EXERCISE_COUNT = 5
_ITEM_LIST_KEYS = ("exercises", "quiz", "quizzes", "questions", "items", "topics", "recommendedTopics")
_SINGLE_ITEM_KEYS = {
    ContentFormat.QUIZ: ("question",),
    ContentFormat.CODING: ("prompt", "question", "description"),
    ContentFormat.RECOMMENDED_TOPICS: ("title",),
}


@lru_cache(maxsize=1)
def _get_completion_client() -> CompletionClient:
    return build_completion_client(settings.completion_config())


def _require_completion_client() -> CompletionClient:
    try:
        return _get_completion_client()
    except ConfigError as exc:
        raise HTTPException(
            status_code=503,
            detail=build_structured_error_detail(
                error_code="config_error",
                message=str(exc),
                retryable=False,
                detail=f"completion_client_init_failed:config_error:{exc}",
            ),
        ) from exc


class _RequestModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class RoadmapRequest(_RequestModel):
    topic: str = Field(min_length=1)


class LectureRequest(_RequestModel):
    topic: str = Field(min_length=1)
    difficulty: str = "intermediate"
    modular: bool = False


class ExercisesRequest(_RequestModel):
    topic: str = Field(min_length=1)
    difficulty: str = "intermediate"
    quizCount: int = 0
    codingCount: int = 0


class PersonalizedContentRequest(_RequestModel):
    contentType: str = Field(min_length=1)
    profile: LearnerProfile | None = None


class ChatMessage(_RequestModel):
    role: str = "user"
    content: str = ""


class ChatRequest(_RequestModel):
    message: str = Field(min_length=1)
    history: list[ChatMessage] = Field(default_factory=list)
    profile: LearnerProfile | None = None


def _clamp_count(value: int, default: int) -> int:
    if value <= 0:
        return default
    return min(value, MAX_EXERCISE_COUNT)


def _failure_kind(exc: UpstreamExhausted) -> str:
    if isinstance(exc.last_error, UpstreamError):
        return exc.last_error.kind
    return exc.kind


def _completion_stage(client: CompletionClient) -> Stage:
    def _stage(prompt: str) -> StageResult[RawCompletion]:
        try:
            return StageResult.success(client.complete(prompt))
        except UpstreamExhausted as exc:
            return StageResult.failure(PipelineError(kind=_failure_kind(exc), reason=str(exc)))

    return _stage


def _json_stage(raw: RawCompletion) -> StageResult[Any]:
    payload = parse_json_payload(raw.text)
    if payload is None:
        return StageResult.failure(parse_failure("no_json_in_completion"))
    return StageResult.success(payload)


def _roadmap_stage(raw: RawCompletion) -> StageResult[RoadmapContent]:
    return StageResult.success(RoadmapContent(steps=parse_roadmap_steps(raw.text)))


def _lecture_stage(modular: bool) -> Stage:
    def _stage(payload: Any) -> StageResult[LectureContent]:
        if isinstance(payload, dict) and isinstance(payload.get("lecture"), dict):
            payload = payload["lecture"]
        if not isinstance(payload, dict):
            return StageResult.failure(parse_failure("lecture_not_object"))
        try:
            lecture = Lecture.model_validate(payload)
        except ValidationError as exc:
            return StageResult.failure(parse_failure(f"lecture_schema_mismatch:{exc.error_count()}_errors"))
        return StageResult.success(LectureContent(modular=modular, lecture=lecture))

    return _stage


def _as_item_list(payload: Any, item_keys: tuple[str, ...]) -> list[Any] | None:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _ITEM_LIST_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
        # A single item object instead of an array.
        if any(payload.get(key) for key in item_keys):
            return [payload]
    return None


def _items_stage(request: GenerationRequest) -> Stage:
    def _stage(payload: Any) -> StageResult[Any]:
        raw_items = _as_item_list(payload, _SINGLE_ITEM_KEYS[request.format])
        if raw_items is None:
            return StageResult.failure(parse_failure("items_not_list"))

        if request.format is ContentFormat.RECOMMENDED_TOPICS:
            topics = [t for t in (repair_recommended_topic(item) for item in raw_items) if t is not None]
            return StageResult.success(TopicRecommendations(topics=topics))

        repair = repair_quiz_item if request.format is ContentFormat.QUIZ else repair_coding_item
        items = [
            item
            for item in (repair(raw, topic=request.topic, difficulty=request.difficulty) for raw in raw_items)
            if item is not None
        ][: request.count]
        if request.format is ContentFormat.QUIZ:
            return StageResult.success(QuizSet(items=items))
        return StageResult.success(CodingSet(items=items))

    return _stage


def _validate_stage(content: Any) -> StageResult[Any]:
    report = validate_content(content)
    if not report.passed:
        return StageResult.failure(validation_failure(report.reason))
    return StageResult.success(content)


def _enrich_stage(request: GenerationRequest) -> Stage:
    def _stage(content: LectureContent) -> StageResult[LectureContent]:
        lecture = enrich_lecture(content.lecture, topic=request.topic, difficulty=request.difficulty)
        return StageResult.success(content.model_copy(update={"lecture": lecture}))

    return _stage


def _format_stages(request: GenerationRequest) -> list[tuple[str, Stage]]:
    if request.format is ContentFormat.ROADMAP:
        return [("roadmap_parse", _roadmap_stage), ("validate", _validate_stage)]
    if request.format is ContentFormat.LECTURE:
        return [
            ("normalize", _json_stage),
            ("lecture_parse", _lecture_stage(request.modular)),
            ("validate", _validate_stage),
            ("enrich", _enrich_stage(request)),
        ]
    return [
        ("normalize", _json_stage),
        ("items_parse", _items_stage(request)),
        ("validate", _validate_stage),
    ]


def generate(
    request: GenerationRequest,
    *,
    client: CompletionClient,
) -> GenerationOutcome[NormalizedContent]:
    """Run completion -> normalize -> validate; any failure yields fallback content."""
    stages: list[tuple[str, Stage]] = [("completion", _completion_stage(client))]
    stages.extend(_format_stages(request))
    return run_with_fallback(
        build_prompt(request),
        stages,
        pipeline=f"{request.format.value}_generate",
        fallback=lambda: fallback_content(request),
    )


def _top_up(items: list[Any], target: int, make_extra: Callable[[int], list[Any]], label: str) -> list[Any]:
    missing = target - len(items)
    if missing <= 0:
        return items
    logger.info("adding %d fallback %s exercises to meet requested count", missing, label)
    return items + make_extra(missing)


def generate_roadmap(payload: RoadmapRequest) -> dict[str, Any]:
    client = _require_completion_client()
    request = GenerationRequest(topic=payload.topic, format=ContentFormat.ROADMAP)
    outcome = generate(request, client=client)
    return {"roadmap": outcome.content.steps}


def generate_lecture(payload: LectureRequest, *, modular: bool = False) -> dict[str, Any]:
    client = _require_completion_client()
    request = GenerationRequest(
        topic=payload.topic,
        difficulty=payload.difficulty,
        format=ContentFormat.LECTURE,
        modular=payload.modular or modular,
    )
    outcome = generate(request, client=client)
    return {"lecture": outcome.content.lecture.model_dump()}


def generate_exercises(payload: ExercisesRequest) -> dict[str, Any]:
    client = _require_completion_client()
    quiz_count = _clamp_count(payload.quizCount, DEFAULT_QUIZ_COUNT)
    coding_count = _clamp_count(payload.codingCount, DEFAULT_CODING_COUNT)

    quiz_request = GenerationRequest(
        topic=payload.topic,
        difficulty=payload.difficulty,
        format=ContentFormat.QUIZ,
        count=quiz_count,
    )
    coding_request = GenerationRequest(
        topic=payload.topic,
        difficulty=payload.difficulty,
        format=ContentFormat.CODING,
        count=coding_count,
    )

    quiz_items = _top_up(
        generate(quiz_request, client=client).content.items,
        quiz_count,
        lambda n: fallback_quiz_items(quiz_request.topic, quiz_request.difficulty, n),
        "quiz",
    )
    coding_items = _top_up(
        generate(coding_request, client=client).content.items,
        coding_count,
        lambda n: fallback_coding_items(coding_request.topic, coding_request.difficulty, n),
        "coding",
    )

    exercises = [item.model_dump() for item in quiz_items + coding_items]
    logger.info("returning %d exercises for %s", len(exercises), payload.topic)
    return {"exercises": exercises, "topic": payload.topic}


def personalized_content(payload: PersonalizedContentRequest) -> dict[str, Any]:
    if payload.contentType != ContentFormat.RECOMMENDED_TOPICS.value:
        raise HTTPException(
            status_code=400,
            detail=build_structured_error_detail(
                error_code="invalid_request",
                message=f"unsupported content type: {payload.contentType}",
                retryable=False,
            ),
        )

    client = _require_completion_client()
    request = GenerationRequest(
        topic=", ".join((payload.profile or LearnerProfile()).interests) or "technology",
        format=ContentFormat.RECOMMENDED_TOPICS,
        profile=payload.profile or LearnerProfile(),
    )
    outcome = generate(request, client=client)
    return {"recommendedTopics": [topic.model_dump() for topic in outcome.content.topics]}


def send_chat_message(payload: ChatRequest) -> dict[str, Any]:
    client = _require_completion_client()
    prompt = build_chat_prompt(
        payload.message,
        [message.model_dump() for message in payload.history],
        payload.profile or LearnerProfile(),
    )

    try:
        completion = client.complete(prompt)
    except UpstreamExhausted as exc:
        kind = _failure_kind(exc)
        code = "empty_output" if kind == "upstream_empty" else "upstream_error"
        raise HTTPException(
            status_code=502,
            detail=build_structured_error_detail(
                error_code=code,
                message=str(exc),
                detail=format_failure_detail("chat_generate", code, str(exc)),
            ),
        ) from exc

    return {"message": completion.text.strip()}
