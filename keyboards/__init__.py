"""Keyboards module exports"""

from .inline import get_confirmation_keyboard, get_status_keyboard

__all__ = ['get_confirmation_keyboard', 'get_status_keyboard']
