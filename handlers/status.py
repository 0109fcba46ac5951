"""Launch status view, phase notifications and status buttons"""

import logging
from telegram import Update
from telegram.error import BadRequest
from telegram.ext import ContextTypes
from telegram.helpers import escape_markdown

from api_client import LaunchAPIError
from keyboards import get_status_keyboard
from states import Phase
from utils import format_xrp
from workflow import LaunchWorkflow, registry

logger = logging.getLogger(__name__)

MAX_LOG_LINES = 5

LOG_ICONS = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "warn": "⚠️",
}


def _md(value) -> str:
    return escape_markdown(str(value), version=1)


def _short(address: str) -> str:
    return f"{address[:8]}...{address[-4:]}" if len(address) > 14 else address


def render_status(workflow: LaunchWorkflow) -> str:
    """Build the Markdown status message for a chat's launch"""
    phase = workflow.phase
    session = workflow.session

    if phase is Phase.INITIALIZING:
        return "⏳ Submitting launch..."

    if phase is Phase.ERROR:
        text = f"❌ *Launch failed*\n\n{_md(workflow.error or 'Launch failed')}"
        if session is not None:
            text += "\n\nPress Done to clear it."
    elif phase is Phase.IDLE or session is None:
        text = "No active launch.\nUse /launch to create a token."
    elif phase is Phase.FUNDING:
        funding = workflow.funding
        required = funding.required_balance if funding and funding.required_balance else session.required_funding
        lines = [
            "💰 *Waiting for funding*\n",
            f"Send *{format_xrp(required)} XRP* to the issuer wallet:",
            f"`{session.issuer_address or 'pending'}`\n",
        ]
        if funding:
            lines.append(
                f"Received: {format_xrp(funding.current_balance)} / {format_xrp(funding.required_balance)} XRP "
                f"({funding.progress_percent:.0f}%)"
            )
            if funding.sufficient:
                lines.append("✅ Funding complete! Waiting for the launch service to continue...")
            elif funding.partially_funded:
                lines.append(f"⚠️ Partially funded, {format_xrp(funding.shortfall)} XRP still missing")
        lines.append(f"\n📊 Status: `{session.status}`")
        text = "\n".join(lines)
    elif phase is Phase.PROCESSING:
        lines = [
            "🔄 *Launch in progress*\n",
            f"📊 Step: `{session.status}`",
        ]
        if session.progress_message or session.progress is not None:
            lines.append(f"{_md(session.progress_message or 'Processing...')} {session.progress or 0:.0f}%")
        text = "\n".join(lines)
    elif phase is Phase.COMPLETED:
        lines = ["🎉 *Token launched!*\n"]
        if session.issuer_address:
            lines.append(f"Issuer: `{session.issuer_address}`")
        if session.amm_address:
            lines.append(f"AMM: `{session.amm_address}`")
        if session.holder_address:
            lines.append(f"Holder: `{session.holder_address}`")
        if session.user_check_id:
            lines.append(
                f"\n🎁 Your tokens are waiting in check `{_short(session.user_check_id)}`.\n"
                "Cash it from your wallet to claim them."
            )
        lines.append("\nPress Done to start over.")
        text = "\n".join(lines)

    if workflow.logs and phase in (Phase.FUNDING, Phase.PROCESSING):
        recent = workflow.logs[-MAX_LOG_LINES:]
        log_lines = [f"{LOG_ICONS.get(entry.level, '•')} {_md(entry.message)}" for entry in recent]
        text += "\n\n📜 *Log:*\n" + "\n".join(log_lines)

    if workflow.notice:
        text += f"\n\nℹ️ {_md(workflow.notice)}"
    return text


def make_phase_listener(bot):
    """Create a listener that pushes phase changes to the chat"""

    async def on_phase_change(workflow: LaunchWorkflow, previous: Phase) -> None:
        # The confirm handler already shows the submitting message
        if workflow.chat_id is None or workflow.phase is Phase.INITIALIZING:
            return
        await bot.send_message(
            chat_id=workflow.chat_id,
            text=render_status(workflow),
            parse_mode='Markdown',
            reply_markup=get_status_keyboard(workflow.phase)
        )

    return on_phase_change


async def _edit_status(query, workflow: LaunchWorkflow) -> None:
    try:
        await query.edit_message_text(
            render_status(workflow),
            parse_mode='Markdown',
            reply_markup=get_status_keyboard(workflow.phase)
        )
    except BadRequest as e:
        # If message is not modified (same content), just ignore
        if "not modified" in str(e).lower():
            pass
        else:
            raise


async def status_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/status command - show current launch state"""
    workflow = registry.get(update.effective_user.id)
    await update.message.reply_text(
        render_status(workflow),
        parse_mode='Markdown',
        reply_markup=get_status_keyboard(workflow.phase)
    )


async def refresh_status(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle Refresh button press - fetch status immediately"""
    query = update.callback_query
    await query.answer()

    workflow = registry.get(update.effective_user.id)
    previous = workflow.phase
    workflow.notice = None
    if workflow.session is not None:
        try:
            await workflow.poll_once()
        except LaunchAPIError as e:
            logger.error(f"Error refreshing launch status: {e.message}")
            workflow.notice = f"Could not refresh: {e.message}"

    # A phase change was already pushed as a new message by the listener
    if workflow.phase is previous:
        await _edit_status(query, workflow)


async def continue_launch(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle Continue button press"""
    query = update.callback_query
    await query.answer("▶️ Requesting continuation...")

    workflow = registry.get(update.effective_user.id)
    await workflow.continue_launch()
    await _edit_status(query, workflow)


async def cancel_launch(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle Cancel Launch button press"""
    query = update.callback_query
    await query.answer()

    workflow = registry.get(update.effective_user.id)
    cancelled = await workflow.cancel_launch()
    if cancelled:
        text = "❌ Launch cancelled.\nUse /launch to start over."
    else:
        text = (
            f"⚠️ {_md(workflow.notice or 'Cancel failed')}\n\n"
            "The local launch was cleared. Use /launch to start over."
        )
    await query.edit_message_text(text, parse_mode='Markdown')


async def reset_launch(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle Done button press - forget a finished launch"""
    query = update.callback_query
    await query.answer()

    workflow = registry.get(update.effective_user.id)
    if workflow.phase not in (Phase.COMPLETED, Phase.ERROR):
        await _edit_status(query, workflow)
        return
    workflow.reset()
    await query.edit_message_text("✅ Cleared.\nUse /launch to create another token.")


async def reset_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/reset command - forget a finished launch"""
    workflow = registry.get(update.effective_user.id)
    if workflow.phase in (Phase.FUNDING, Phase.PROCESSING, Phase.INITIALIZING):
        await update.message.reply_text(
            "⚠️ A launch is still running.\n"
            "Use /status and press Cancel Launch while it waits for funding."
        )
        return
    workflow.reset()
    await update.message.reply_text("✅ Cleared.\nUse /launch to create another token.")
