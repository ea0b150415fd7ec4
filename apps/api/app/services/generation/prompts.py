from __future__ import annotations

import json

from app.domain.content.models import GenerationRequest, LearnerProfile


def _schema(example: object) -> str:
    return json.dumps(example, indent=2, ensure_ascii=False)


def build_roadmap_prompt(topic: str) -> str:
    return (
        "You are an AI learning assistant. Your task is to create a clear and structured roadmap "
        f'for learning "{topic}".\n\n'
        "Response format:\n"
        "Step name\nStep name\nStep name\nStep name\nStep name\n\n"
        'Example for "HTML":\n'
        "HTML Basics\nSemantic Markup\nForms and Input\nCSS Integration\nPractice\n\n"
        "Use that response format\n"
        'Don\'t add text like "Here\'s the roadmap"\n'
        "Don't use **asterisks**\n"
        "Between 5 and 18 steps, one step per line, each step at most 15 characters"
    )


def _section_example(topic: str, title: str, *, with_code: bool = False) -> dict:
    section = {
        "title": title,
        "content": "Clear, educational content explaining the concept. At least three full sentences.",
        "keyPoints": [
            f"Key concept 1 about {topic}",
            f"Key concept 2 about {topic}",
            f"Key concept 3 about {topic}",
        ],
    }
    if with_code:
        section["codeExample"] = "// Relevant, syntactically correct code example"
        section["note"] = "An important note or caveat about this topic"
        section["tips"] = ["Practical tip for mastering this concept"]
    return section


def build_lecture_prompt(topic: str, difficulty: str, *, modular: bool) -> str:
    common = {
        "title": f"Comprehensive Guide to {topic}",
        "introduction": "A compelling introduction paragraph that hooks the reader",
        "description": "A brief overview of what this lecture covers",
    }
    tail = {
        "keywords": [topic, "learning", "tutorial", "fundamentals"],
        "estimatedTime": "20-30 minutes",
        "difficulty": difficulty,
        "summary": "An overall summary of the lecture, highlighting key takeaways",
        "resources": [
            {
                "title": f"Official {topic} Documentation",
                "url": "https://example.com/docs",
                "type": "documentation",
                "description": f"Official documentation for {topic}",
            }
        ],
    }
    if modular:
        body = {
            **common,
            "modules": [
                {
                    "title": f"Module 1: Fundamentals of {topic}",
                    "sections": [
                        _section_example(topic, f"What is {topic}?", with_code=True),
                        _section_example(topic, f"Core Principles of {topic}"),
                    ],
                    "summary": "A concise summary of what was covered in this module",
                },
                {
                    "title": f"Module 2: Advanced {topic} Concepts",
                    "sections": [_section_example(topic, "Advanced Technique 1", with_code=True)],
                    "summary": "A recap of the advanced concepts covered",
                },
            ],
            **tail,
        }
        shape_rules = (
            "1. Create 2-4 modules, each with 2-3 sections\n"
            "2. Every section \"content\" must be at least 30 characters of real explanation\n"
        )
    else:
        body = {
            **common,
            "sections": [
                _section_example(topic, f"Introduction to {topic}"),
                _section_example(topic, f"Core Concepts of {topic}", with_code=True),
                _section_example(topic, f"Practical Applications of {topic}"),
            ],
            **tail,
        }
        shape_rules = (
            "1. Create 3-6 sections\n"
            "2. Every section \"content\" must be at least 30 characters of real explanation\n"
        )

    return (
        f'You are an expert educator creating a rich, structured lecture on "{topic}" '
        f"for {difficulty} level students.\n\n"
        "Your task is to generate the lecture in JSON format that exactly matches this structure:\n"
        f"{_schema(body)}\n\n"
        "IMPORTANT:\n"
        f"{shape_rules}"
        f"3. Include rich, educational content about {topic}\n"
        "4. Include actual code examples where appropriate (using correct syntax)\n"
        '5. Make the "keyPoints" informative and specific\n'
        "6. Return ONLY the JSON object, nothing else"
    )


def build_quiz_prompt(topic: str, difficulty: str, count: int) -> str:
    example = [
        {
            "type": "quiz",
            "question": "What is the main purpose of containerization in Docker?",
            "options": [
                "To create virtual machines",
                "To isolate applications and their dependencies",
                "To replace operating systems",
                "To minimize hardware requirements",
            ],
            "correctAnswer": 1,
            "explanation": "Containers isolate applications and their dependencies, making them portable.",
            "difficulty": "basic",
        }
    ]
    return (
        f'Generate {count} multiple choice quiz questions about "{topic}" with difficulty level: {difficulty}.\n\n'
        "For each quiz question:\n"
        f"1. Provide a clear, specific question about {topic} concepts\n"
        "2. Include exactly 4 answer options that are distinct and reasonable\n"
        "3. Mark the correct answer with a 0-based index (0-3)\n"
        "4. Add a brief but informative explanation of why the answer is correct\n\n"
        "Format your response as a JSON array with the EXACT structure shown below:\n"
        f"{_schema(example)}\n\n"
        "IMPORTANT:\n"
        '- Each "correctAnswer" MUST be a number from 0-3, not a string\n'
        '- Ensure "type" is always "quiz"\n'
        "- Return ONLY the JSON array"
    )


def build_coding_prompt(topic: str, difficulty: str, count: int) -> str:
    example = [
        {
            "type": "coding",
            "prompt": "Write a function that builds a docker run command with a port mapping.",
            "starterCode": "function deployContainer(imageName, hostPort, containerPort) {\n  // Your code here\n}",
            "solution": (
                "function deployContainer(imageName, hostPort, containerPort) {\n"
                "  return 'docker run -d -p ' + hostPort + ':' + containerPort + ' ' + imageName;\n}"
            ),
            "hints": [
                "Use the -d flag to run the container in detached mode",
                "Port mapping is specified with the -p flag",
            ],
            "difficulty": "intermediate",
        }
    ]
    return (
        f'Generate {count} coding exercises about "{topic}" with difficulty level: {difficulty}.\n\n'
        "For each coding exercise:\n"
        "1. Provide a clear, specific prompt describing what the code should accomplish\n"
        "2. Include JavaScript starter code with helpful comments and a function signature\n"
        "3. Include a complete working solution that follows best practices\n"
        "4. Add 2-3 hints that guide without giving away the solution\n\n"
        "Format your response as a JSON array with the EXACT structure shown below:\n"
        f"{_schema(example)}\n\n"
        "IMPORTANT:\n"
        '- Ensure "type" is always "coding"\n'
        "- The solution must be fully implemented, not just comments\n"
        "- Return ONLY the JSON array"
    )


def build_recommended_topics_prompt(profile: LearnerProfile) -> str:
    example = [
        {"title": "Topic title", "description": "Brief description", "duration": "2 weeks"},
    ]
    return (
        f"You are an AI learning assistant for {profile.experience} level.\n"
        f"User is {profile.age} years old, interested in: {', '.join(profile.interests) or 'technology'}.\n"
        f"Learning goals: {', '.join(profile.goals) or 'general growth'}.\n"
        f"Preferred learning style: {profile.learningStyle}.\n\n"
        "Suggest 3 specific topics to study that match the user's profile and interests.\n"
        "For each topic, provide a short title (up to 5 words), a brief description (up to 25 words) "
        "and a duration in weeks.\n\n"
        "Response must be strictly a JSON array:\n"
        f"{_schema(example)}"
    )


def build_prompt(request: GenerationRequest) -> str:
    fmt = request.format.value
    if fmt == "roadmap":
        return build_roadmap_prompt(request.topic)
    if fmt == "lecture":
        return build_lecture_prompt(request.topic, request.difficulty, modular=request.modular)
    if fmt == "quiz":
        return build_quiz_prompt(request.topic, request.difficulty, request.count)
    if fmt == "coding-exercise":
        return build_coding_prompt(request.topic, request.difficulty, request.count)
    return build_recommended_topics_prompt(request.profile or LearnerProfile())


def build_chat_prompt(message: str, history: list[dict[str, str]], profile: LearnerProfile) -> str:
    rows: list[str] = []
    for item in history[-10:]:
        text = " ".join(str(item.get("content") or "").split())
        if not text:
            continue
        speaker = "User" if item.get("role") == "user" else "Mentor&AI"
        rows.append(f"{speaker}: {text}")

    return (
        "You are Mentor&AI, an educational AI mentor specializing in helping people learn "
        "programming and technology.\n\n"
        "User Profile:\n"
        f"- Learning Style: {profile.learningStyle}\n"
        f"- Experience Level: {profile.experience}\n"
        f"- Interests: {', '.join(profile.interests)}\n"
        f"- Name: {profile.displayName or 'learner'}\n\n"
        "Previous conversation:\n"
        f"{chr(10).join(rows) or 'none'}\n\n"
        f"Current message: {message}\n\n"
        "Respond as Mentor&AI in a helpful, educational, and engaging way. Be concise but thorough. "
        "When providing code examples, ensure they are correct and well-formatted."
    )
