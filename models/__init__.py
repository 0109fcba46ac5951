"""Models module exports"""

from .launch import (
    LaunchRequest,
    LaunchValidationError,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    LogEntry,
    Session,
    is_xrpl_address,
    validate_currency_code
)
from .session import LaunchDraft, DraftStorage, draft_storage
from .store import SessionStore, STORAGE_KEY, store_for_chat

__all__ = [
    'LaunchRequest',
    'LaunchValidationError',
    'MAX_DESCRIPTION_LENGTH',
    'MAX_NAME_LENGTH',
    'LogEntry',
    'Session',
    'is_xrpl_address',
    'validate_currency_code',
    'LaunchDraft',
    'DraftStorage',
    'draft_storage',
    'SessionStore',
    'STORAGE_KEY',
    'store_for_chat'
]
