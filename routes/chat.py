"""
Route handlers for chat operations.
Handles the /api/chat streaming endpoint.
"""
from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from auth import get_user_id, unauthorized
from config import Config
from models.api_models import ChatRequest
from models.chat_models import ChatContext
from services.chat_service import ChatService
from services.llm_provider import get_llm_provider
from services.stream_service import StreamService
from utils.logger import app_logger

router = APIRouter()


@router.post("/api/chat")
async def chat(request: Request, payload: ChatRequest):
    """
    Answer the latest question from openFDA label data, streamed as plain text.
    """
    user_id = get_user_id(request)

    if not user_id or not payload.messages:
        return unauthorized()

    settings = Config.llm_settings(payload.preview_token)
    context = ChatContext(
        request=payload,
        user_id=user_id,
        settings=settings,
        llm=get_llm_provider(settings)
    )

    app_logger.info(f"Chat request from {user_id}: {len(payload.messages)} messages")
    messages = await ChatService.prepare_answer(context)

    answer = await StreamService.start_answer(context, messages)

    return StreamingResponse(
        answer,
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no"
        }
    )
