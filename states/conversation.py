"""Conversation states for the bot"""

from enum import IntEnum


class ConversationState(IntEnum):
    """States for the launch form conversation flow"""
    WAITING_TICKER = 0
    WAITING_NAME = 1
    WAITING_SUPPLY = 2
    WAITING_AMM_XRP = 3
    WAITING_CHECK_PERCENT = 4
    WAITING_WALLET = 5
    WAITING_DESCRIPTION = 6
    WAITING_LINKS = 7
    CONFIRMING = 8
