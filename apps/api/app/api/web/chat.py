from typing import Any

from fastapi import APIRouter

from app.services.generation.generation_service import ChatRequest, send_chat_message


router = APIRouter(prefix="/api/web", tags=["web"])


@router.post("/chat")
def mentor_chat(payload: ChatRequest) -> dict[str, Any]:
    return send_chat_message(payload)
