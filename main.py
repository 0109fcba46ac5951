"""
Telegram bot for launching tokens on the XRP Ledger
Fill the form -> press LAUNCH -> fund the issuer -> done
"""

import logging
import sys
from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    MessageHandler,
    CallbackQueryHandler,
    ConversationHandler,
    filters
)

from config import settings
from states import ConversationState
from handlers import (
    start,
    cancel,
    help_command,
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
    cancel_draft,
    make_phase_listener,
    status_command,
    refresh_status,
    continue_launch,
    cancel_launch,
    reset_launch,
    reset_command
)
from api_client import api
from workflow import recover_all, registry

# Logging setup
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
# httpx logs every request at INFO; the client already does
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_conversation_handler() -> ConversationHandler:
    """Create and configure the launch form conversation handler"""
    text_input = filters.TEXT & ~filters.COMMAND
    return ConversationHandler(
        entry_points=[CommandHandler("launch", launch_command)],
        states={
            ConversationState.WAITING_TICKER: [
                MessageHandler(text_input, receive_ticker)
            ],
            ConversationState.WAITING_NAME: [
                MessageHandler(text_input, receive_name)
            ],
            ConversationState.WAITING_SUPPLY: [
                MessageHandler(text_input, receive_supply)
            ],
            ConversationState.WAITING_AMM_XRP: [
                MessageHandler(text_input, receive_amm_xrp)
            ],
            ConversationState.WAITING_CHECK_PERCENT: [
                MessageHandler(text_input, receive_check_percent)
            ],
            ConversationState.WAITING_WALLET: [
                MessageHandler(text_input, receive_wallet)
            ],
            ConversationState.WAITING_DESCRIPTION: [
                MessageHandler(text_input, receive_description)
            ],
            ConversationState.WAITING_LINKS: [
                MessageHandler(text_input, receive_links)
            ],
            ConversationState.CONFIRMING: [
                MessageHandler(filters.PHOTO, receive_icon),
                CallbackQueryHandler(toggle_anti_snipe, pattern="^toggle_anti_snipe$"),
                CallbackQueryHandler(confirm_launch, pattern="^confirm_launch$"),
                CallbackQueryHandler(cancel_draft, pattern="^cancel_draft$")
            ],
        },
        fallbacks=[
            CommandHandler("cancel", cancel),
        ],
        allow_reentry=True,
    )


def register_handlers(application: Application) -> None:
    """Register all bot handlers"""
    # Launch form
    application.add_handler(create_conversation_handler())

    # Status buttons (outside conversation)
    application.add_handler(
        CallbackQueryHandler(refresh_status, pattern="^refresh_status$")
    )
    application.add_handler(
        CallbackQueryHandler(continue_launch, pattern="^continue_launch$")
    )
    application.add_handler(
        CallbackQueryHandler(cancel_launch, pattern="^cancel_launch$")
    )
    application.add_handler(
        CallbackQueryHandler(reset_launch, pattern="^reset_launch$")
    )

    # Standalone command handlers
    application.add_handler(CommandHandler("start", start))
    application.add_handler(CommandHandler("status", status_command))
    application.add_handler(CommandHandler("reset", reset_command))
    application.add_handler(CommandHandler("help", help_command))


async def post_init(application: Application) -> None:
    """Attach notifications and resume launches interrupted by a restart"""
    registry.listener = make_phase_listener(application.bot)
    recovered = await recover_all(registry)
    if recovered:
        logger.info(f"Recovered {len(recovered)} launch session(s)")


async def post_shutdown(application: Application) -> None:
    """Stop poll loops and close the HTTP client"""
    await registry.shutdown()
    await api.close()


def main():
    """Start the bot"""
    if not settings.telegram_bot_token:
        logger.error("TELEGRAM_BOT_TOKEN is not set")
        sys.exit(1)

    # Create application
    application = (
        Application.builder()
        .token(settings.telegram_bot_token)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    # Register all handlers
    register_handlers(application)

    # Start the bot
    logger.info("Starting bot...")
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
