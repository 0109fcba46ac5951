"""States module exports"""

from .conversation import ConversationState
from .phase import Phase, phase_for_status, is_terminal

__all__ = ['ConversationState', 'Phase', 'phase_for_status', 'is_terminal']
