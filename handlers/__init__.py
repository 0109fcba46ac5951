"""Handlers module exports"""

from .common import start, cancel, help_command
from .launch import (
    launch_command,
    receive_ticker,
    receive_name,
    receive_supply,
    receive_amm_xrp,
    receive_check_percent,
    receive_wallet,
    receive_description,
    receive_links,
    receive_icon,
    toggle_anti_snipe,
    confirm_launch,
    cancel_draft
)
from .status import (
    make_phase_listener,
    render_status,
    status_command,
    refresh_status,
    continue_launch,
    cancel_launch,
    reset_launch,
    reset_command
)

__all__ = [
    'start',
    'cancel',
    'help_command',
    'launch_command',
    'receive_ticker',
    'receive_name',
    'receive_supply',
    'receive_amm_xrp',
    'receive_check_percent',
    'receive_wallet',
    'receive_description',
    'receive_links',
    'receive_icon',
    'toggle_anti_snipe',
    'confirm_launch',
    'cancel_draft',
    'make_phase_listener',
    'render_status',
    'status_command',
    'refresh_status',
    'continue_launch',
    'cancel_launch',
    'reset_launch',
    'reset_command'
]
