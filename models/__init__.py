"""
Models package exports.
"""
from models.api_models import Message, ChatRequest, ChatSummary, PersistedChat
from models.chat_models import ChatContext, SearchConstraint, StructuredSearch

__all__ = [
    'Message',
    'ChatRequest',
    'ChatSummary',
    'PersistedChat',
    'ChatContext',
    'SearchConstraint',
    'StructuredSearch'
]
