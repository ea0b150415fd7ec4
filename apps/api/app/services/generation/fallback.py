"""Deterministic templated content used when generation fails.

Nothing here calls out or raises: every builder interpolates the topic into
fixed templates sized to pass the structural validator.
"""

from __future__ import annotations

from typing import Any

from app.domain.content.models import (
    CodingExercise,
    CodingSet,
    ContentFormat,
    GenerationRequest,
    LearnerProfile,
    Lecture,
    LectureContent,
    LectureModule,
    LectureSection,
    NormalizedContent,
    QuizExercise,
    QuizSet,
    RecommendedTopic,
    Resource,
    RoadmapContent,
    TopicRecommendations,
)


def upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def camel_case(text: str) -> str:
    words = text.split()
    if not words:
        return ""
    return words[0].lower() + "".join(upper_first(word.lower()) for word in words[1:])


def identifier_for(topic: str) -> str:
    cleaned = "".join(ch for ch in upper_first(camel_case(topic)) if ch.isalnum() or ch == "_")
    return cleaned or "Topic"


def slug_for(topic: str) -> str:
    return "-".join(topic.lower().split()) or "topic"


def content_for_section(topic: str, section_title: str) -> str:
    title = section_title.lower()

    if "introduction" in title or "overview" in title:
        return (
            f"This section introduces you to the fundamental concepts of {topic}. We'll explore what {topic} is, "
            "its importance in the field, and the core principles that make it valuable. This foundation will "
            "help you understand more complex topics as we progress."
        )
    if any(word in title for word in ("concept", "principle", "fundamental")):
        return (
            f"In this section, we explore the core concepts and principles of {topic}. These foundational ideas "
            "form the building blocks that support all advanced topics in this field, broken down into "
            "understandable components."
        )
    if any(word in title for word in ("application", "practice", "implementation")):
        return (
            f"This section demonstrates how {topic} is applied in practical scenarios. We'll move beyond theory "
            "to see how these concepts work in real-world situations, with implementation strategies and "
            "common patterns."
        )
    if "advanced" in title or "expert" in title:
        return (
            f"In this advanced section, we delve into more complex aspects of {topic} that build on the "
            "foundational knowledge you've already gained, including optimization strategies and specialized "
            "techniques used in professional settings."
        )
    return (
        f"This section explores important aspects of {topic} that contribute to a comprehensive understanding "
        "of the subject. We'll examine key ideas, practical applications, and relevant examples that "
        "illustrate the concepts clearly."
    )


def code_example_for(topic: str) -> str:
    name = identifier_for(topic)
    return (
        f"// Example implementation for {topic}\n"
        f"function demonstrate{name}(items) {{\n"
        f"  console.log('Processing input using {topic} principles');\n"
        "  return items.map(item => ({ ...item, processed: true }));\n"
        "}\n\n"
        f"demonstrate{name}([{{ id: 1 }}, {{ id: 2 }}]);"
    )


def resources_for(topic: str) -> list[Resource]:
    slug = slug_for(topic)
    title = upper_first(topic)
    return [
        Resource(
            title=f"Official {title} Documentation",
            url=f"https://docs.{slug}.org",
            type="documentation",
            description=f"Comprehensive official documentation for {topic} with tutorials and examples.",
        ),
        Resource(
            title=f"{title}: A Comprehensive Guide",
            url=f"https://www.{slug}-guide.com",
            type="book",
            description=f"In-depth book covering {topic} from beginner to advanced topics.",
        ),
        Resource(
            title=f"{title} Community Forum",
            url=f"https://community.{slug}.org",
            type="forum",
            description=f"Community forum where you can discuss {topic} with experts and peers.",
        ),
    ]


def _core_sections(topic: str) -> list[LectureSection]:
    return [
        LectureSection(
            title=f"Introduction to {topic}",
            content=content_for_section(topic, "introduction"),
            keyPoints=[
                f"Definition and scope of {topic}",
                f"Core components of {topic}",
                f"Why {topic} matters in today's context",
            ],
        ),
        LectureSection(
            title=f"Core Principles of {topic}",
            content=content_for_section(topic, "principles"),
            keyPoints=[
                "Essential terminology and frameworks",
                "Fundamental principles and theories",
                "Relationship between core components",
            ],
        ),
        LectureSection(
            title=f"Practical Applications of {topic}",
            content=content_for_section(topic, "applications"),
            keyPoints=[
                "Real-world use cases and scenarios",
                "Implementation strategies and techniques",
                "Common challenges and how to overcome them",
            ],
            codeExample=code_example_for(topic),
        ),
        LectureSection(
            title=f"Best Practices for {topic}",
            content=(
                f"This section covers best practices and guidelines for working with {topic}. We'll examine "
                "industry standards, recommended approaches, and proven strategies that help you avoid common "
                "pitfalls and improve the quality of your work."
            ),
            keyPoints=[
                "Industry-standard approaches",
                "Quality assurance and testing methods",
                "Maintenance and sustainability considerations",
            ],
            tips=[
                f"Always start with clear requirements before implementing {topic} solutions",
                "Document your approach and decisions for future reference",
                "Test thoroughly using both standard and edge cases",
            ],
        ),
        LectureSection(
            title=f"Advanced Topics in {topic}",
            content=content_for_section(topic, "advanced"),
            keyPoints=[
                "Complex problem-solving strategies",
                "Performance optimization and scaling",
                "Integration with other systems and frameworks",
            ],
            note="These advanced topics build on the core principles covered earlier.",
        ),
    ]


def fallback_lecture(topic: str, difficulty: str, modular: bool) -> Lecture:
    sections = _core_sections(topic)
    lecture = Lecture(
        title=f"Introduction to {topic}",
        introduction=(
            f"Welcome to this guide to {topic}. It takes you from the fundamentals through to advanced "
            f"applications so you finish with a well-rounded understanding of {topic}."
        ),
        description=f"This lecture provides an overview of {topic}, covering basic principles and applications.",
        difficulty=difficulty,
        keywords=[topic, "guide", "tutorial", "fundamentals", "best practices"],
        summary=(
            f"This lecture provided an overview of {topic}, from fundamental concepts to advanced applications. "
            "Continue with the practice exercises to reinforce your understanding."
        ),
        resources=resources_for(topic),
    )
    if modular:
        lecture.estimatedTime = "30-45 minutes"
        lecture.modules = [
            LectureModule(
                title=f"Module 1: Fundamentals of {topic}",
                sections=sections[0:2],
                summary=f"This module covered the basic concepts, terminology, and core principles of {topic}.",
            ),
            LectureModule(
                title="Module 2: Applications and Best Practices",
                sections=sections[2:4],
                summary=f"This module explored how {topic} is applied in practice and how to do it well.",
            ),
            LectureModule(
                title="Module 3: Advanced Concepts",
                sections=sections[4:],
                summary=f"This module explored advanced topics in {topic}.",
            ),
        ]
    else:
        lecture.estimatedTime = "25-35 minutes"
        lecture.sections = sections
    return lecture


def _quiz_templates(topic: str) -> list[dict[str, Any]]:
    return [
        {
            "question": f"Which of the following is a core concept in {topic}?",
            "options": ["Fundamental principle", "Unrelated concept", "Tangential idea", "None of the above"],
            "correctAnswer": 0,
            "explanation": f"Understanding fundamental principles is crucial for mastering {topic}.",
        },
        {
            "question": f"What is the primary benefit of learning {topic}?",
            "options": [
                "Enhanced problem-solving",
                "Improved technical skills",
                "Better career opportunities",
                "All of the above",
            ],
            "correctAnswer": 3,
            "explanation": f"{upper_first(topic)} builds problem-solving skills, technical knowledge, and career options.",
        },
        {
            "question": f"Which approach is best for learning {topic}?",
            "options": [
                "Theoretical study only",
                "Practical application only",
                "Balanced theory and practice",
                "Memorization",
            ],
            "correctAnswer": 2,
            "explanation": f"A balanced approach of theory and practice is most effective for learning {topic}.",
        },
        {
            "question": f"How does {topic} relate to other fields?",
            "options": ["No relation", "Minor overlap", "Significant integration", "Complete replacement"],
            "correctAnswer": 2,
            "explanation": f"{upper_first(topic)} significantly integrates with and complements related fields.",
        },
        {
            "question": f"What is an advanced application of {topic}?",
            "options": ["Basic implementation", "Intermediate usage", "Advanced application", "Expert optimization"],
            "correctAnswer": 3,
            "explanation": f"Expert optimization represents the most advanced application of {topic} principles.",
        },
    ]


def fallback_quiz_items(topic: str, difficulty: str, count: int) -> list[QuizExercise]:
    templates = _quiz_templates(topic)
    items: list[QuizExercise] = []
    for idx in range(max(1, count)):
        base = templates[idx % len(templates)]
        suffix = f" (Question {idx + 1})" if idx >= len(templates) else ""
        items.append(
            QuizExercise(
                question=f"{base['question']}{suffix}",
                options=list(base["options"]),
                correctAnswer=base["correctAnswer"],
                explanation=base["explanation"],
                difficulty=difficulty,
            )
        )
    return items


def fallback_coding_items(topic: str, difficulty: str, count: int) -> list[CodingExercise]:
    name = identifier_for(topic)
    lower_name = name[:1].lower() + name[1:]
    templates = [
        CodingExercise(
            prompt=f"Write a function that demonstrates a basic principle of {topic}",
            starterCode=(
                f"function demonstrate{name}() {{\n"
                "  // Your code here\n"
                "  // Return a string explaining a basic principle\n"
                "}"
            ),
            solution=(
                f"function demonstrate{name}() {{\n"
                f"  return 'This demonstrates a basic principle of {topic}: always start with fundamentals.';\n"
                "}"
            ),
            hints=[
                f"Think about the most fundamental concept in {topic}",
                "Keep your explanation clear and concise",
                "Focus on one principle rather than trying to cover everything",
            ],
            difficulty=difficulty,
        ),
        CodingExercise(
            prompt=f"Implement a function that applies {topic} to solve a simple problem",
            starterCode=(
                f"function apply{name}(input) {{\n"
                "  // Your code here\n"
                f"  // Process the input using {topic} principles\n"
                "}"
            ),
            solution=(
                f"function apply{name}(input) {{\n"
                "  const processed = 'Processed: ' + input;\n"
                f"  return 'Applied {topic} principles and got: ' + processed;\n"
                "}"
            ),
            hints=[
                "Start by defining what your function should accomplish",
                "Think about how to process the input parameter",
                f"Apply the core concepts of {topic} to transform the input",
            ],
            difficulty=difficulty,
        ),
        CodingExercise(
            prompt=f"Create a utility function related to {topic} that could be reused across projects",
            starterCode=(
                f"function {lower_name}Utility(config) {{\n"
                "  // Your code here\n"
                "  // config is an object with settings\n"
                "}"
            ),
            solution=(
                f"function {lower_name}Utility(config) {{\n"
                "  const settings = { level: 'basic', timeout: 1000, ...config };\n"
                "  return {\n"
                f"    apply: data => 'Applied ' + settings.level + ' {topic} to ' + data,\n"
                f"    getInfo: () => 'Utility for applying {topic} principles',\n"
                "  };\n"
                "}"
            ),
            hints=[
                "Consider what configuration options would be useful",
                "Implement multiple methods for different functionalities",
                "Make your utility flexible enough to handle different scenarios",
            ],
            difficulty=difficulty,
        ),
    ]

    items: list[CodingExercise] = []
    for idx in range(max(1, count)):
        base = templates[idx % len(templates)]
        suffix = f" (Exercise {idx + 1})" if idx >= len(templates) else ""
        items.append(base.model_copy(update={"prompt": f"{base.prompt}{suffix}"}))
    return items


def fallback_roadmap(topic: str) -> list[str]:
    steps = [
        f"{topic} Basics",
        "Core Concepts",
        "Tools and Setup",
        "Hands-on Practice",
        "Advanced Topics",
        "Real Projects",
    ]
    return [step.strip() for step in steps]


def fallback_recommended_topics(profile: LearnerProfile | None) -> list[RecommendedTopic]:
    interests = profile.interests if profile and profile.interests else []
    interest = interests[0] if interests else "technology"
    return [
        RecommendedTopic(
            title=f"Introduction to {interest}",
            description=f"Learn the fundamentals of {interest} for beginners",
            duration="2 weeks",
        ),
        RecommendedTopic(
            title="Web Development Basics",
            description="HTML, CSS, and JavaScript fundamentals",
            duration="3 weeks",
        ),
    ]


def fallback_content(request: GenerationRequest) -> NormalizedContent:
    topic = request.topic
    if request.format is ContentFormat.LECTURE:
        return LectureContent(
            modular=request.modular,
            lecture=fallback_lecture(topic, request.difficulty, request.modular),
        )
    if request.format is ContentFormat.QUIZ:
        return QuizSet(items=fallback_quiz_items(topic, request.difficulty, request.count))
    if request.format is ContentFormat.CODING:
        return CodingSet(items=fallback_coding_items(topic, request.difficulty, request.count))
    if request.format is ContentFormat.RECOMMENDED_TOPICS:
        return TopicRecommendations(topics=fallback_recommended_topics(request.profile))
    return RoadmapContent(steps=fallback_roadmap(topic))


def enrich_lecture(lecture: Lecture, *, topic: str, difficulty: str) -> Lecture:
    """Fill optional presentation fields on a lecture that already passed validation."""
    enriched = lecture.model_copy(deep=True)
    if not enriched.difficulty:
        enriched.difficulty = difficulty
    if not enriched.estimatedTime:
        enriched.estimatedTime = "10-15 minutes"
    if not enriched.introduction:
        enriched.introduction = (
            f"This lecture provides an introduction to {topic}. You'll learn about the core concepts, "
            "practical applications, and best practices."
        )
    if not enriched.description:
        enriched.description = (
            f"This lecture provides an overview of {topic}, covering basic principles and applications."
        )
    if not enriched.summary:
        enriched.summary = (
            f"In this lecture, we covered the fundamental aspects of {topic}. Continue with the practice "
            "exercises to reinforce your understanding."
        )
    if not enriched.resources:
        enriched.resources = resources_for(topic)
    for idx, module in enumerate(enriched.modules):
        if not module.title:
            module.title = f"Module {idx + 1}"
    for section in enriched.sections + [s for m in enriched.modules for s in m.sections]:
        if not section.title:
            section.title = "Topic Overview"
    return enriched
