import re
import pytest
from unittest.mock import AsyncMock
from redis.exceptions import ConnectionError as RedisConnectionError

from services.chat_store import ChatStore, generate_chat_id
from tests.helpers import assert_chat_persisted, stored_messages
from utils.errors import ChatStoreError

MESSAGES = [
    {"role": "system", "content": "Provide a detailed report"},
    {"role": "user", "content": "[{\"warnings\": null}]"},
    {"role": "user", "content": "Question:\nWhat are the warnings associated with Xarelto?"},
]

@pytest.fixture
def store(memory_redis):
    return ChatStore(client=memory_redis)

def test_generate_chat_id_is_seven_alphanumerics():
    """Generated ids should be 7 alphanumeric characters and differ between calls."""
    ids = {generate_chat_id() for _ in range(20)}
    assert all(re.fullmatch(r"[0-9A-Za-z]{7}", chat_id) for chat_id in ids)
    assert len(ids) > 1

@pytest.mark.anyio
async def test_save_chat_writes_record_and_index(store, memory_redis):
    """Given a completed answer, save_chat should write one record and one index entry."""
    chat = await store.save_chat(
        user_id="user-1",
        title_source="What are the warnings associated with Xarelto?",
        messages=MESSAGES,
        completion="Summary: bleeding risk."
    )

    record = assert_chat_persisted(memory_redis, chat.id, "user-1")
    assert record["title"] == "What are the warnings associated with Xarelto?"
    assert int(record["createdAt"]) == chat.created_at

    messages = stored_messages(record)
    assert messages[:-1] == MESSAGES
    assert messages[-1] == {"role": "assistant", "content": "Summary: bleeding risk."}

@pytest.mark.anyio
async def test_save_chat_truncates_title_to_100_characters(store):
    """Given a long first message, the title should keep its first 100 characters."""
    long_question = "x" * 250

    chat = await store.save_chat("user-1", long_question, MESSAGES, "answer", chat_id="abc1234")

    assert chat.title == "x" * 100
    assert chat.path == "/chat/abc1234"

@pytest.mark.anyio
async def test_save_chat_with_same_id_overwrites(store, memory_redis):
    """Given the same client id twice, the record and index entry should be replaced, not duplicated."""
    await store.save_chat("user-1", "first", MESSAGES, "first answer", chat_id="chat123")
    await store.save_chat("user-1", "second", MESSAGES[:1], "second answer", chat_id="chat123")

    record = assert_chat_persisted(memory_redis, "chat123", "user-1")
    assert len(memory_redis.hashes) == 1
    assert len(memory_redis.sorted_sets["user:chat:user-1"]) == 1
    assert record["title"] == "second"
    assert stored_messages(record)[-1]["content"] == "second answer"
    assert len(stored_messages(record)) == 2

@pytest.mark.anyio
async def test_get_chat_only_returns_owned_chats(store):
    """Given a chat owned by another user, get_chat should return None."""
    await store.save_chat("user-1", "question", MESSAGES, "answer", chat_id="owned01")

    chat = await store.get_chat("owned01", "user-1")
    assert chat is not None
    assert chat.user_id == "user-1"
    assert chat.messages[-1].content == "answer"

    assert await store.get_chat("owned01", "user-2") is None
    assert await store.get_chat("missing", "user-1") is None

@pytest.mark.anyio
async def test_get_chats_lists_newest_first(store, memory_redis):
    """Given several chats, get_chats should order them by creation time, newest first."""
    await store.save_chat("user-1", "older", MESSAGES, "a", chat_id="older01")
    await store.save_chat("user-1", "newer", MESSAGES, "b", chat_id="newer01")
    await store.save_chat("user-2", "other", MESSAGES, "c", chat_id="other01")
    memory_redis.sorted_sets["user:chat:user-1"]["chat:older01"] = 1000.0
    memory_redis.sorted_sets["user:chat:user-1"]["chat:newer01"] = 2000.0

    chats = await store.get_chats("user-1")

    assert [chat.id for chat in chats] == ["newer01", "older01"]

    assert len(memory_redis.pipelines) == 1
    assert memory_redis.pipelines[0].executed == [[("hgetall", "chat:newer01"), ("hgetall", "chat:older01")]]

@pytest.mark.anyio
async def test_remove_chat_deletes_record_and_index(store, memory_redis):
    """Given an owned chat, remove_chat should delete both writes; other users cannot remove it."""
    await store.save_chat("user-1", "question", MESSAGES, "answer", chat_id="gone001")

    assert await store.remove_chat("gone001", "user-2") is False
    assert "chat:gone001" in memory_redis.hashes

    assert await store.remove_chat("gone001", "user-1") is True
    assert "chat:gone001" not in memory_redis.hashes
    assert memory_redis.sorted_sets["user:chat:user-1"] == {}

@pytest.mark.anyio
async def test_save_chat_wraps_store_failures():
    """Given an unreachable store, save_chat should raise ChatStoreError."""
    client = AsyncMock()
    client.hget.return_value = None
    client.hset.side_effect = RedisConnectionError("connection refused")

    with pytest.raises(ChatStoreError):
        await ChatStore(client=client).save_chat("user-1", "q", MESSAGES, "a")

    client.zadd.assert_not_called()

@pytest.mark.anyio
async def test_get_chats_without_index_skips_pipeline(store, memory_redis):
    """Given a user with no chats, get_chats should return an empty list without a batch read."""
    assert await store.get_chats("user-1") == []
    assert memory_redis.pipelines == []

@pytest.mark.anyio
async def test_overwrite_by_another_user_moves_index_entry(store, memory_redis):
    """Given a chat id taken over by another user, only the new owner should list it."""
    await store.save_chat("user-1", "first question", MESSAGES, "a", chat_id="shared1")
    await store.save_chat("user-2", "second question", MESSAGES, "b", chat_id="shared1")

    assert_chat_persisted(memory_redis, "shared1", "user-2")
    assert memory_redis.sorted_sets["user:chat:user-1"] == {}
    assert await store.get_chats("user-1") == []
    assert [chat.title for chat in await store.get_chats("user-2")] == ["second question"]

@pytest.mark.anyio
async def test_get_chats_skips_records_owned_by_another_user(store, memory_redis):
    """Given a stale index entry pointing at another user's chat, get_chats should leave it out."""
    await store.save_chat("user-2", "other question", MESSAGES, "b", chat_id="theirs1")
    memory_redis.sorted_sets["user:chat:user-1"] = {"chat:theirs1": 1.0}

    assert await store.get_chats("user-1") == []
