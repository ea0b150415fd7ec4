from typing import Any

from fastapi import APIRouter

from app.services.generation.generation_service import (
    ExercisesRequest,
    LectureRequest,
    PersonalizedContentRequest,
    RoadmapRequest,
    generate_exercises as service_generate_exercises,
    generate_lecture as service_generate_lecture,
    generate_roadmap as service_generate_roadmap,
    personalized_content as service_personalized_content,
)


router = APIRouter(prefix="/api/web", tags=["web"])


@router.post("/roadmap")
def generate_roadmap(payload: RoadmapRequest) -> dict[str, Any]:
    return service_generate_roadmap(payload)


@router.post("/lecture")
def generate_lecture(payload: LectureRequest) -> dict[str, Any]:
    return service_generate_lecture(payload)


@router.post("/lecture/modular")
def generate_modular_lecture(payload: LectureRequest) -> dict[str, Any]:
    return service_generate_lecture(payload, modular=True)


@router.post("/exercises")
def generate_exercises(payload: ExercisesRequest) -> dict[str, Any]:
    return service_generate_exercises(payload)


@router.post("/personalized-content")
def personalized_content(payload: PersonalizedContentRequest) -> dict[str, Any]:
    return service_personalized_content(payload)
