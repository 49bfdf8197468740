"""
Data models for chat processing.
Contains the request context and the structured openFDA search.
"""
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING
from pydantic import BaseModel, Field, field_validator
from config import Config, LLMSettings
from models.api_models import ChatRequest
from utils.constants import LabelField, OPENFDA_FIELDS, OPENFDA_PREFIX

if TYPE_CHECKING:
    from services.llm_provider import LLMProvider


def validate_search_field(field: str) -> str:
    """
    Check a search field against the label vocabulary.

    Plain names must be label fields; names under "openfda." must be
    harmonized openFDA fields.

    Raises:
        ValueError: If the field is outside the vocabulary
    """
    name = field.strip()
    if name.startswith(OPENFDA_PREFIX):
        bare = name[len(OPENFDA_PREFIX):]
        if bare not in {f.value for f in OPENFDA_FIELDS}:
            raise ValueError(f"'{name}' is not an openFDA harmonized field")
        return name

    try:
        LabelField(name)
    except ValueError:
        raise ValueError(f"'{name}' is not a drug label field") from None
    return name


class SearchConstraint(BaseModel):
    """One field == term constraint; constraints of a search are ANDed."""
    field: str
    term: str = Field(..., min_length=1)

    @field_validator("field")
    @classmethod
    def check_field(cls, v: str) -> str:
        return validate_search_field(v)

    @field_validator("term", mode="before")
    @classmethod
    def coerce_term(cls, v):
        """Models sometimes emit numbers for ids and codes."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class StructuredSearch(BaseModel):
    """Machine-readable form of a user's question."""
    constraints: List[SearchConstraint] = Field(..., min_length=1)
    fields_to_return: List[LabelField] = Field(..., min_length=1)
    limit: int = Field(Config.DEFAULT_SEARCH_LIMIT, ge=1, le=Config.MAX_SEARCH_LIMIT)

    @classmethod
    def from_model_output(cls, data: dict) -> "StructuredSearch":
        """
        Build from the translator's JSON shape:
        {"search_params": [{field: term}], "fields_to_return": [...], "limit": n}
        """
        if not isinstance(data, dict):
            raise ValueError("structured search must be a JSON object")

        search_params = data.get("search_params") or []
        if isinstance(search_params, dict):
            search_params = [search_params]

        constraints = []
        for search_dict in search_params:
            if not isinstance(search_dict, dict):
                raise ValueError("search_params entries must be objects")
            for field, term in search_dict.items():
                constraints.append({"field": field, "term": term})

        fields = data.get("fields_to_return") or []
        payload = {"constraints": constraints, "fields_to_return": fields}
        if data.get("limit") is not None:
            payload["limit"] = data["limit"]

        return cls.model_validate(payload)

    @property
    def field_names(self) -> list[str]:
        """Fields to return, as plain strings."""
        return [field.value for field in self.fields_to_return]


@dataclass
class ChatContext:
    """
    Context object containing all chat processing state.
    Provides centralized access to request-scoped data, eliminating parameter chaining.
    """
    request: ChatRequest
    user_id: str
    settings: LLMSettings
    llm: "LLMProvider"
    call_count: int = 0

    @property
    def messages(self) -> list[dict]:
        """Conversation from the request as plain dicts."""
        return [message.model_dump() for message in self.request.messages]

    @property
    def question(self) -> str:
        """Content of the latest message."""
        return self.request.messages[-1].content

    @property
    def chat_id(self) -> Optional[str]:
        """Client-supplied chat id, if any."""
        return self.request.id

    def next_call_number(self) -> int:
        """Increment and return the next LLM call number."""
        self.call_count += 1
        return self.call_count
