from typing import Any

from fastapi import APIRouter

from app.services.generation.generation_service import ExercisesRequest, generate_exercises


router = APIRouter(prefix="/api/public", tags=["public"])


@router.post("/exercises")
def public_exercises(payload: ExercisesRequest) -> dict[str, Any]:
    return generate_exercises(payload)
