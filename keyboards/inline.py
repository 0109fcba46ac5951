"""Inline keyboards for the bot"""

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from states import Phase


def get_confirmation_keyboard(anti_snipe: bool = False) -> InlineKeyboardMarkup:
    """Get keyboard with LAUNCH, anti-snipe toggle and Cancel buttons"""
    keyboard = [
        [
            InlineKeyboardButton("🚀 LAUNCH", callback_data="confirm_launch"),
            InlineKeyboardButton(
                f"🛡 Anti-snipe: {'ON' if anti_snipe else 'OFF'}",
                callback_data="toggle_anti_snipe"
            )
        ],
        [
            InlineKeyboardButton("❌ Cancel", callback_data="cancel_draft")
        ]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_status_keyboard(phase: Phase) -> InlineKeyboardMarkup | None:
    """Get keyboard matching the current launch phase"""
    if phase is Phase.FUNDING:
        keyboard = [
            [
                InlineKeyboardButton("🔄 Refresh", callback_data="refresh_status"),
                InlineKeyboardButton("❌ Cancel Launch", callback_data="cancel_launch")
            ]
        ]
    elif phase is Phase.PROCESSING:
        keyboard = [
            [
                InlineKeyboardButton("🔄 Refresh", callback_data="refresh_status"),
                InlineKeyboardButton("▶️ Continue", callback_data="continue_launch")
            ]
        ]
    elif phase in (Phase.COMPLETED, Phase.ERROR):
        keyboard = [
            [
                InlineKeyboardButton("✅ Done", callback_data="reset_launch")
            ]
        ]
    else:
        return None
    return InlineKeyboardMarkup(keyboard)
