import logging
from telegram import Update
from telegram.ext import ContextTypes, ConversationHandler

from keyboards import get_status_keyboard
from models import draft_storage
from states import Phase
from workflow import registry
from .status import render_status

logger = logging.getLogger(__name__)


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/start command - welcome or resume view"""
    telegram_id = update.effective_user.id
    workflow = registry.get(telegram_id)

    if workflow.phase is not Phase.IDLE:
        await update.message.reply_text(
            render_status(workflow),
            parse_mode='Markdown',
            reply_markup=get_status_keyboard(workflow.phase)
        )
        return

    await update.message.reply_text(
        "🚀 *XRPL Token Launcher*\n\n"
        "Create a token on the XRP Ledger with its own AMM pool in one go.\n\n"
        "1. Fill in ticker, supply and pool size\n"
        "2. Fund the issuer wallet with the quoted XRP\n"
        "3. The launch service does the rest\n\n"
        "Use /launch to begin.",
        parse_mode='Markdown'
    )


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Cancel the launch form"""
    telegram_id = update.effective_user.id

    draft_storage.delete(telegram_id)

    await update.message.reply_text(
        "❌ Operation cancelled.\n"
        "Use /launch to start over."
    )

    return ConversationHandler.END


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Help command"""
    help_text = (
        "🤖 *XRPL Token Launcher*\n\n"
        "*Available commands:*\n"
        "/launch - Create a new token\n"
        "/status - Show the current launch\n"
        "/reset - Clear a finished or failed launch\n"
        "/cancel - Abort the launch form\n"
        "/help - Show this message\n\n"
        "*How it works:*\n"
        "1. Send /launch and answer the questions\n"
        "2. Press LAUNCH on the summary\n"
        "3. Send the requested XRP to the issuer wallet\n"
        "4. Wait for the completion message\n\n"
        "Progress is tracked even if the bot restarts."
    )

    await update.message.reply_text(help_text, parse_mode='Markdown')
