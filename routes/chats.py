"""
Route handlers for persisted chats.
"""
from fastapi import APIRouter, HTTPException, Request, status
from auth import get_user_id, unauthorized
from models.api_models import ChatSummary, PersistedChat
from services.chat_store import ChatStore

router = APIRouter(prefix="/api/chats")


@router.get("", response_model=list[ChatSummary], response_model_by_alias=True)
async def list_chats(request: Request):
    """List the caller's chats, newest first."""
    user_id = get_user_id(request)
    if not user_id:
        return unauthorized()

    return await ChatStore().get_chats(user_id)


@router.get("/{chat_id}", response_model=PersistedChat, response_model_by_alias=True)
async def get_chat(chat_id: str, request: Request):
    """Return one of the caller's chats."""
    user_id = get_user_id(request)
    if not user_id:
        return unauthorized()

    chat = await ChatStore().get_chat(chat_id, user_id)
    if chat is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
    return chat


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_chat(chat_id: str, request: Request):
    """Delete one of the caller's chats."""
    user_id = get_user_id(request)
    if not user_id:
        return unauthorized()

    if not await ChatStore().remove_chat(chat_id, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
