"""
Chat persistence in the key-value store.
Each chat is a hash "chat:<id>"; each user has a sorted set "user:chat:<user_id>"
of chat keys scored by creation time.
"""
import secrets
import string
import time
from typing import Optional
import redis.asyncio as redis
from redis.exceptions import RedisError

from config import Config
from models.api_models import ChatSummary, Message, PersistedChat
from utils.errors import ChatStoreError
from utils.kv_client import KVClientManager
from utils.logger import app_logger

_ID_ALPHABET = string.digits + string.ascii_letters
_ID_LENGTH = 7


def generate_chat_id() -> str:
    """Random 7-character alphanumeric chat id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def chat_key(chat_id: str) -> str:
    return f"chat:{chat_id}"


def user_index_key(user_id: str) -> str:
    return f"user:chat:{user_id}"


class ChatStore:
    """Reads and writes persisted chats."""

    def __init__(self, client: Optional[redis.Redis] = None):
        self.client = client or KVClientManager.get_client()

    async def save_chat(
        self,
        user_id: str,
        title_source: str,
        messages: list[dict],
        completion: str,
        chat_id: Optional[str] = None
    ) -> PersistedChat:
        """
        Persist a chat after its answer completed.

        Writes the chat record, then the user's index entry. Re-using a chat
        id overwrites both instead of adding new ones.

        Args:
            user_id: Owner of the chat
            title_source: Text the title is cut from (first message of the request)
            messages: Messages sent to the model for the answer
            completion: Full assistant answer
            chat_id: Client-supplied id, generated when absent

        Returns:
            The stored chat
        """
        chat_id = chat_id or generate_chat_id()
        created_at = int(time.time() * 1000)

        chat = PersistedChat(
            id=chat_id,
            title=title_source[:Config.TITLE_LENGTH],
            userId=user_id,
            createdAt=created_at,
            path=f"/chat/{chat_id}",
            messages=[
                *(Message.model_validate(message) for message in messages),
                Message(role="assistant", content=completion)
            ]
        )

        key = chat_key(chat_id)
        try:
            previous_owner = await self.client.hget(key, "userId")
            # hset only updates the given fields; drop the old record so an overwrite is complete
            await self.client.delete(key)
            if previous_owner and previous_owner != user_id:
                await self.client.zrem(user_index_key(previous_owner), key)
            await self.client.hset(key, mapping=chat.to_record())
            await self.client.zadd(user_index_key(user_id), {key: created_at})
        except RedisError as e:
            app_logger.error(f"Failed to persist chat {chat_id}: {e}")
            raise ChatStoreError(f"Failed to persist chat {chat_id}") from e

        app_logger.info(f"Persisted chat {chat_id} for user {user_id} ({len(chat.messages)} messages)")
        return chat

    async def get_chat(self, chat_id: str, user_id: str) -> Optional[PersistedChat]:
        """Return the chat when it exists and belongs to the user."""
        try:
            record = await self.client.hgetall(chat_key(chat_id))
        except RedisError as e:
            raise ChatStoreError(f"Failed to read chat {chat_id}") from e

        if not record or record.get("userId") != user_id:
            return None

        return PersistedChat.from_record(record)

    async def get_chats(self, user_id: str) -> list[ChatSummary]:
        """Return the user's chats, newest first."""
        try:
            keys = await self.client.zrange(user_index_key(user_id), 0, -1, desc=True)
            if not keys:
                return []

            async with self.client.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.hgetall(key)
                records = await pipe.execute()
        except RedisError as e:
            raise ChatStoreError(f"Failed to list chats for {user_id}") from e

        return [
            ChatSummary.model_validate(record)
            for record in records
            if record and record.get("userId") == user_id
        ]

    async def remove_chat(self, chat_id: str, user_id: str) -> bool:
        """
        Delete a chat and its index entry.

        Returns:
            False when the chat does not exist or belongs to another user
        """
        key = chat_key(chat_id)
        try:
            owner = await self.client.hget(key, "userId")
            if owner != user_id:
                return False

            await self.client.delete(key)
            await self.client.zrem(user_index_key(user_id), key)
        except RedisError as e:
            raise ChatStoreError(f"Failed to remove chat {chat_id}") from e

        app_logger.info(f"Removed chat {chat_id} for user {user_id}")
        return True
