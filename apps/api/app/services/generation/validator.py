from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any

from app.domain.content.models import (
    CodingExercise,
    CodingSet,
    Lecture,
    LectureContent,
    NormalizedContent,
    QuizExercise,
    QuizSet,
    RecommendedTopic,
    RoadmapContent,
    TopicRecommendations,
    coerce_str_list,
)


MIN_SECTION_CONTENT_CHARS = 30
MIN_LECTURE_BODY_CHARS = 50
QUIZ_OPTION_COUNT = 4


@dataclass(frozen=True)
class ValidationReport:
    passed: bool
    reason: str = ""

    @classmethod
    def ok(cls) -> "ValidationReport":
        return cls(passed=True)

    @classmethod
    def fail(cls, reason: str) -> "ValidationReport":
        return cls(passed=False, reason=reason)


def _as_non_empty_str(value: Any, fallback: str) -> str:
    if isinstance(value, str):
        stripped = value.strip()
        if stripped:
            return stripped
    return fallback


def _first_present(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if item.get(key) is not None:
            return item[key]
    return None


def normalize_option_text(value: Any) -> str:
    text = str(value or "").strip()
    if not text:
        return ""

    labeled = re.match(r"^option\s*[0-9A-Da-d]+(?:\s*[:.)-]\s*|\s+)(.+)$", text, re.IGNORECASE)
    if labeled:
        return str(labeled.group(1)).strip()

    numbered = re.match(r"^\s*(?:\(?[1-9]\)?[.)-]|[A-Da-d][.)-])\s+(.+)$", text)
    if numbered:
        return str(numbered.group(1)).strip()

    return text


def _coerce_answer_index(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if re.fullmatch(r"-?\d+", text):
            return int(text)
        if re.fullmatch(r"[A-Da-d]", text):
            return ord(text.upper()) - ord("A")
    return 0


def _lecture_title_rule(lecture: Lecture) -> ValidationReport:
    if not lecture.title.strip():
        return ValidationReport.fail("lecture_title_missing")
    if not lecture.introduction.strip() and not lecture.description.strip():
        return ValidationReport.fail("lecture_intro_missing")
    return ValidationReport.ok()


def validate_lecture(lecture: Lecture, *, modular: bool) -> ValidationReport:
    if modular:
        if not lecture.modules:
            return ValidationReport.fail("lecture_modules_missing")
        for m_idx, module in enumerate(lecture.modules):
            if not module.sections:
                return ValidationReport.fail(f"module_{m_idx}_sections_missing")
            for s_idx, section in enumerate(module.sections):
                if len(section.content.strip()) < MIN_SECTION_CONTENT_CHARS:
                    return ValidationReport.fail(f"module_{m_idx}_section_{s_idx}_content_short")
    else:
        if not lecture.sections and len(lecture.content.strip()) < MIN_LECTURE_BODY_CHARS:
            return ValidationReport.fail("lecture_body_missing")
        for s_idx, section in enumerate(lecture.sections):
            if len(section.content.strip()) < MIN_SECTION_CONTENT_CHARS:
                return ValidationReport.fail(f"section_{s_idx}_content_short")

    return _lecture_title_rule(lecture)


def repair_quiz_item(raw: Any, *, topic: str, difficulty: str) -> QuizExercise | None:
    if not isinstance(raw, dict):
        return None

    options: list[str] = []
    # Raw option index -> cleaned index; blanks map to None, duplicates to the kept copy.
    positions: list[int | None] = []
    raw_options = raw.get("options")
    if isinstance(raw_options, list):
        for opt in raw_options:
            candidate = normalize_option_text(opt)
            if not candidate:
                positions.append(None)
                continue
            if candidate not in options:
                options.append(candidate)
            positions.append(options.index(candidate))
    options = options[:QUIZ_OPTION_COUNT]
    while len(options) < QUIZ_OPTION_COUNT:
        label = f"Option {len(options) + 1}"
        options.append(label if label not in options else f"{label}.")

    raw_answer = _coerce_answer_index(_first_present(raw, "correctAnswer", "correct_answer", "answer"))
    correct_answer = positions[raw_answer] if 0 <= raw_answer < len(positions) else None
    if correct_answer is None or correct_answer >= QUIZ_OPTION_COUNT:
        correct_answer = 0

    return QuizExercise(
        question=_as_non_empty_str(raw.get("question"), f"What is an important concept in {topic}?"),
        options=options,
        correctAnswer=correct_answer,
        explanation=_as_non_empty_str(
            raw.get("explanation"),
            f"This question tests your understanding of key concepts in {topic}.",
        ),
        difficulty=_as_non_empty_str(raw.get("difficulty"), difficulty),
    )


def repair_coding_item(raw: Any, *, topic: str, difficulty: str) -> CodingExercise | None:
    if not isinstance(raw, dict):
        return None

    hints = coerce_str_list(raw.get("hints"))
    if not hints:
        hints = [
            f"Think about the core principles of {topic}",
            "Break down the problem into smaller steps",
            "Consider edge cases in your solution",
        ]

    return CodingExercise(
        prompt=_as_non_empty_str(
            _first_present(raw, "prompt", "question", "description"),
            f"Write a function that demonstrates a key concept of {topic}",
        ),
        starterCode=_as_non_empty_str(
            _first_present(raw, "starterCode", "starter_code"),
            f"// Write your {topic} solution here\nfunction solution() {{\n  // Your code here\n}}",
        ),
        solution=_as_non_empty_str(
            raw.get("solution"),
            f"// Example solution\nfunction solution() {{\n  // Implementation for {topic}\n  return 'Solution completed';\n}}",
        ),
        hints=hints,
        difficulty=_as_non_empty_str(raw.get("difficulty"), difficulty),
    )


def repair_recommended_topic(raw: Any) -> RecommendedTopic | None:
    if not isinstance(raw, dict):
        return None
    title = _as_non_empty_str(raw.get("title"), "")
    if not title:
        return None
    return RecommendedTopic(
        title=title,
        description=_as_non_empty_str(raw.get("description"), f"Learn the essentials of {title}"),
        duration=_as_non_empty_str(str(raw.get("duration") or ""), "2 weeks"),
    )


def validate_quiz_item(item: QuizExercise) -> ValidationReport:
    if len(item.options) != QUIZ_OPTION_COUNT:
        return ValidationReport.fail("quiz_option_count")
    if not 0 <= item.correctAnswer < len(item.options):
        return ValidationReport.fail("quiz_answer_out_of_range")
    if not item.question.strip():
        return ValidationReport.fail("quiz_question_missing")
    if not item.explanation.strip():
        return ValidationReport.fail("quiz_explanation_missing")
    return ValidationReport.ok()


def validate_coding_item(item: CodingExercise) -> ValidationReport:
    if not item.prompt.strip():
        return ValidationReport.fail("coding_prompt_missing")
    if not item.starterCode.strip():
        return ValidationReport.fail("coding_starter_missing")
    if not item.solution.strip():
        return ValidationReport.fail("coding_solution_missing")
    if not any(hint.strip() for hint in item.hints):
        return ValidationReport.fail("coding_hints_missing")
    return ValidationReport.ok()


def validate_roadmap(steps: list[str]) -> ValidationReport:
    if not any(step.strip() for step in steps):
        return ValidationReport.fail("roadmap_steps_missing")
    return ValidationReport.ok()


def _validate_items(items: list[Any], check, empty_reason: str) -> ValidationReport:
    if not items:
        return ValidationReport.fail(empty_reason)
    for idx, item in enumerate(items):
        report = check(item)
        if not report.passed:
            return ValidationReport.fail(f"item_{idx}:{report.reason}")
    return ValidationReport.ok()


def validate_content(content: NormalizedContent) -> ValidationReport:
    if isinstance(content, LectureContent):
        return validate_lecture(content.lecture, modular=content.modular)
    if isinstance(content, QuizSet):
        return _validate_items(content.items, validate_quiz_item, "quiz_items_missing")
    if isinstance(content, CodingSet):
        return _validate_items(content.items, validate_coding_item, "coding_items_missing")
    if isinstance(content, RoadmapContent):
        return validate_roadmap(content.steps)
    if isinstance(content, TopicRecommendations):
        if not content.topics:
            return ValidationReport.fail("topics_missing")
        if any(not topic.title.strip() for topic in content.topics):
            return ValidationReport.fail("topic_title_missing")
        return ValidationReport.ok()
    return ValidationReport.fail(f"unsupported_content:{type(content).__name__}")
