import unittest

from pydantic import TypeAdapter

from app.domain.content.models import (
    CodingSet,
    Lecture,
    LectureContent,
    LectureModule,
    LectureSection,
    NormalizedContent,
    QuizSet,
    RoadmapContent,
    TopicRecommendations,
)
from app.services.generation.validator import (
    normalize_option_text,
    repair_coding_item,
    repair_quiz_item,
    repair_recommended_topic,
    validate_coding_item,
    validate_content,
    validate_lecture,
    validate_quiz_item,
)


LONG_TEXT = "Containers package an application together with everything it needs to run."


class QuizRepairTests(unittest.TestCase):
    def test_pads_options_and_clamps_answer(self) -> None:
        item = repair_quiz_item(
            {"type": "quiz", "question": "Q?", "options": ["A"], "correctAnswer": 5},
            topic="Docker",
            difficulty="basic",
        )

        self.assertIsNotNone(item)
        self.assertEqual(item.options, ["A", "Option 2", "Option 3", "Option 4"])
        self.assertEqual(item.correctAnswer, 0)
        self.assertEqual(item.question, "Q?")
        self.assertTrue(validate_quiz_item(item).passed)

    def test_labels_are_stripped_and_duplicates_dropped(self) -> None:
        item = repair_quiz_item(
            {
                "question": "Which method appends to a list?",
                "options": ["1) append()", "B. pop()", "pop()", "Option 4: clear()", "sort()"],
                "correct_answer": "A",
                "explanation": "append() adds an item at the end.",
            },
            topic="Python lists",
            difficulty="basic",
        )

        self.assertEqual(item.options, ["append()", "pop()", "clear()", "sort()"])
        self.assertEqual(item.correctAnswer, 0)

    def test_answer_follows_option_past_duplicates_and_blanks(self) -> None:
        deduped = repair_quiz_item(
            {"question": "Capital of England?", "options": ["Paris", "Paris", "London", "Rome"], "correctAnswer": 2},
            topic="Geography",
            difficulty="basic",
        )
        self.assertEqual(deduped.options, ["Paris", "London", "Rome", "Option 4"])
        self.assertEqual(deduped.options[deduped.correctAnswer], "London")

        blank_first = repair_quiz_item(
            {"question": "Pick the right one", "options": ["", "right", "wrong", "other"], "correctAnswer": 1},
            topic="Geography",
            difficulty="basic",
        )
        self.assertEqual(blank_first.options[blank_first.correctAnswer], "right")

        mixed = repair_quiz_item(
            {"question": "Q?", "options": ["a", " ", "a", "b", "c"], "correctAnswer": "D"},
            topic="Geography",
            difficulty="basic",
        )
        self.assertEqual(mixed.options, ["a", "b", "c", "Option 4"])
        self.assertEqual(mixed.options[mixed.correctAnswer], "b")

    def test_answer_on_duplicate_points_to_kept_copy(self) -> None:
        item = repair_quiz_item(
            {"question": "Q?", "options": ["Docker", "Podman", "Docker", "LXC"], "correctAnswer": 2},
            topic="Containers",
            difficulty="basic",
        )
        self.assertEqual(item.options[item.correctAnswer], "Docker")

    def test_answer_on_blank_option_is_clamped(self) -> None:
        item = repair_quiz_item(
            {"question": "Q?", "options": ["a", "", "b", "c"], "correctAnswer": 1},
            topic="Containers",
            difficulty="basic",
        )
        self.assertEqual(item.correctAnswer, 0)

    def test_answer_accepts_digit_strings(self) -> None:
        item = repair_quiz_item(
            {"question": "Q?", "options": ["a", "b", "c", "d"], "correctAnswer": "2"},
            topic="Docker",
            difficulty="basic",
        )
        self.assertEqual(item.correctAnswer, 2)

    def test_missing_fields_are_synthesized_from_topic(self) -> None:
        item = repair_quiz_item({}, topic="Docker", difficulty="advanced")

        self.assertIn("Docker", item.question)
        self.assertIn("Docker", item.explanation)
        self.assertEqual(item.difficulty, "advanced")
        self.assertEqual(len(item.options), 4)
        self.assertTrue(validate_quiz_item(item).passed)

    def test_non_object_items_are_rejected(self) -> None:
        self.assertIsNone(repair_quiz_item("not an item", topic="Docker", difficulty="basic"))
        self.assertIsNone(repair_coding_item(["x"], topic="Docker", difficulty="basic"))

    def test_option_text_normalization(self) -> None:
        self.assertEqual(normalize_option_text("A) Containers"), "Containers")
        self.assertEqual(normalize_option_text("Option 3 - Images"), "Images")
        self.assertEqual(normalize_option_text("  plain  "), "plain")
        self.assertEqual(normalize_option_text(None), "")


class CodingRepairTests(unittest.TestCase):
    def test_missing_fields_are_filled(self) -> None:
        item = repair_coding_item(
            {"question": "Write a function that returns a docker run command", "hints": "Use -p for ports"},
            topic="Docker",
            difficulty="intermediate",
        )

        self.assertEqual(item.prompt, "Write a function that returns a docker run command")
        self.assertEqual(item.hints, ["Use -p for ports"])
        self.assertTrue(item.starterCode)
        self.assertTrue(item.solution)
        self.assertTrue(validate_coding_item(item).passed)

    def test_default_hints_when_absent(self) -> None:
        item = repair_coding_item({"prompt": "Do it"}, topic="Docker", difficulty="basic")
        self.assertEqual(len(item.hints), 3)


class LectureValidationTests(unittest.TestCase):
    def _section(self, content: str = LONG_TEXT) -> LectureSection:
        return LectureSection(title="Images", content=content)

    def test_short_section_content_is_rejected(self) -> None:
        lecture = Lecture(title="X", introduction="Intro", sections=[self._section("short")])
        report = validate_lecture(lecture, modular=False)

        self.assertFalse(report.passed)
        self.assertEqual(report.reason, "section_0_content_short")

    def test_flat_lecture_passes(self) -> None:
        lecture = Lecture(title="Docker", introduction="Intro", sections=[self._section()])
        self.assertTrue(validate_lecture(lecture, modular=False).passed)

    def test_flat_lecture_may_use_body_content(self) -> None:
        lecture = Lecture(title="Docker", description="Overview", content=LONG_TEXT)
        self.assertTrue(validate_lecture(lecture, modular=False).passed)

        empty = Lecture(title="Docker", description="Overview")
        self.assertEqual(validate_lecture(empty, modular=False).reason, "lecture_body_missing")

    def test_title_and_intro_required(self) -> None:
        untitled = Lecture(introduction="Intro", sections=[self._section()])
        self.assertEqual(validate_lecture(untitled, modular=False).reason, "lecture_title_missing")

        no_intro = Lecture(title="Docker", sections=[self._section()])
        self.assertEqual(validate_lecture(no_intro, modular=False).reason, "lecture_intro_missing")

    def test_modular_lecture_requires_modules_with_sections(self) -> None:
        flat = Lecture(title="Docker", introduction="Intro", sections=[self._section()])
        self.assertEqual(validate_lecture(flat, modular=True).reason, "lecture_modules_missing")

        hollow = Lecture(title="Docker", introduction="Intro", modules=[LectureModule(title="M1")])
        self.assertEqual(validate_lecture(hollow, modular=True).reason, "module_0_sections_missing")

        modular = Lecture(
            title="Docker",
            introduction="Intro",
            modules=[LectureModule(title="M1", sections=[self._section()])],
        )
        self.assertTrue(validate_lecture(modular, modular=True).passed)

    def test_null_fields_from_completion_fall_back_to_defaults(self) -> None:
        lecture = Lecture.model_validate(
            {"title": "Docker", "introduction": None, "description": "Overview", "sections": None, "content": LONG_TEXT}
        )
        self.assertEqual(lecture.sections, [])
        self.assertTrue(validate_lecture(lecture, modular=False).passed)


class ContentValidationTests(unittest.TestCase):
    def test_dispatches_on_variant(self) -> None:
        lecture = LectureContent(lecture=Lecture(title="X", introduction="Intro", sections=[]))
        self.assertEqual(validate_content(lecture).reason, "lecture_body_missing")
        self.assertEqual(validate_content(QuizSet(items=[])).reason, "quiz_items_missing")
        self.assertEqual(validate_content(RoadmapContent(steps=[])).reason, "roadmap_steps_missing")
        self.assertEqual(validate_content(TopicRecommendations(topics=[])).reason, "topics_missing")
        self.assertTrue(validate_content(RoadmapContent(steps=["Basics"])).passed)

    def test_union_is_discriminated_by_format(self) -> None:
        adapter = TypeAdapter(NormalizedContent)

        roadmap = adapter.validate_python({"format": "roadmap", "steps": ["Basics"]})
        coding = adapter.validate_python({"format": "coding-exercise", "items": []})

        self.assertIsInstance(roadmap, RoadmapContent)
        self.assertIsInstance(coding, CodingSet)

    def test_unknown_content_fails(self) -> None:
        self.assertFalse(validate_content({"title": "X"}).passed)

    def test_recommended_topic_requires_title(self) -> None:
        self.assertIsNone(repair_recommended_topic({"description": "no title"}))
        topic = repair_recommended_topic({"title": "Docker Basics"})
        self.assertEqual(topic.duration, "2 weeks")


if __name__ == "__main__":
    unittest.main()
