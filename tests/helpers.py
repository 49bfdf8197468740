import json


def chat_payload(*contents, **extra):
    """Request body with alternating user/assistant messages ending on a user message."""
    roles = ["user", "assistant"]
    messages = [
        {"role": roles[i % 2], "content": content}
        for i, content in enumerate(contents)
    ]
    return {"messages": messages, **extra}

def assert_chat_persisted(redis, chat_id, user_id):
    """Assert exactly one record and one index entry exist for the chat."""
    key = f"chat:{chat_id}"
    assert key in redis.hashes, f"No record stored under {key}"

    index = redis.sorted_sets.get(f"user:chat:{user_id}", {})
    assert list(index).count(key) == 1, f"Expected one index entry for {key}, got {list(index)}"

    record = redis.hashes[key]
    assert record["id"] == chat_id
    assert record["userId"] == user_id
    assert record["path"] == f"/chat/{chat_id}"
    assert index[key] == float(record["createdAt"])
    return record

def stored_messages(record):
    """Decode the messages field of a stored chat record."""
    return json.loads(record["messages"])
