"""
Pydantic data models for API requests and responses.
"""
import json
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """Chat message model."""
    role: Literal["system", "user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Chat request model carrying the whole conversation."""
    model_config = ConfigDict(populate_by_name=True)

    messages: List[Message] = Field(default_factory=list)
    preview_token: Optional[str] = Field(None, alias="previewToken", description="API key to use for this request only")
    id: Optional[str] = Field(None, min_length=1, max_length=64, description="Chat id to continue; generated when absent")


class ChatSummary(BaseModel):
    """Entry of a user's chat list."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    user_id: str = Field(alias="userId")
    created_at: int = Field(alias="createdAt")
    path: str


class PersistedChat(ChatSummary):
    """A chat as stored after a completed answer."""
    messages: List[Message]

    def to_record(self) -> dict:
        """Flatten into hash fields; messages are stored as JSON text."""
        record = self.model_dump(by_alias=True, exclude={"messages"})
        record["messages"] = json.dumps([message.model_dump() for message in self.messages])
        return record

    @classmethod
    def from_record(cls, record: dict) -> "PersistedChat":
        """Rebuild a chat from its hash fields."""
        data = dict(record)
        data["messages"] = json.loads(data.get("messages") or "[]")
        return cls.model_validate(data)
