"""Launch form handlers - ticker, name, amounts, wallet, details, confirmation"""

import base64
import logging
from decimal import Decimal, InvalidOperation
from telegram import Update
from telegram.error import BadRequest
from telegram.ext import ContextTypes, ConversationHandler
from telegram.helpers import escape_markdown

from api_client import api, LaunchAPIError
from config import settings
from keyboards import get_confirmation_keyboard, get_status_keyboard
from models import (
    LaunchValidationError,
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    draft_storage,
    is_xrpl_address,
    validate_currency_code
)
from states import ConversationState, Phase
from utils import format_xrp, parse_links
from workflow import LaunchInProgressError, registry
from .status import render_status

logger = logging.getLogger(__name__)

MAX_CHECK_PERCENT = 90
SKIP_WORDS = {"skip", "-", "no", "none"}


def _parse_int(text: str) -> int:
    return int(text.strip().replace(",", "").replace("_", "").replace(" ", ""))


async def launch_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/launch command - begin the launch form"""
    telegram_id = update.effective_user.id
    workflow = registry.get(telegram_id)

    if workflow.phase is not Phase.IDLE:
        await update.message.reply_text(
            render_status(workflow),
            parse_mode='Markdown',
            reply_markup=get_status_keyboard(workflow.phase)
        )
        return ConversationHandler.END

    draft_storage.create(telegram_id)
    await update.message.reply_text(
        "🪙 *New Token Launch*\n\n"
        "Send the ticker for your token (3-15 letters or numbers).\n"
        "Example: `DOGE`\n\n"
        "Use /cancel to abort.",
        parse_mode='Markdown'
    )
    return ConversationState.WAITING_TICKER


async def receive_ticker(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving currency code"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    try:
        draft.currency_code = validate_currency_code(update.message.text)
    except LaunchValidationError as e:
        await update.message.reply_text(f"❌ {e.message}. Try again:")
        return ConversationState.WAITING_TICKER

    await update.message.reply_text(
        f"✅ Ticker: {draft.currency_code}\n\n"
        f"What is the display name of your token? (up to {MAX_NAME_LENGTH} characters)\n"
        "Example: Dogecoin"
    )
    return ConversationState.WAITING_NAME


async def receive_name(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving token display name"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    name = update.message.text.strip()
    if not name:
        await update.message.reply_text("❌ Token name is required. Try again:")
        return ConversationState.WAITING_NAME
    if len(name) > MAX_NAME_LENGTH:
        await update.message.reply_text(f"❌ Maximum {MAX_NAME_LENGTH} characters. Try again:")
        return ConversationState.WAITING_NAME

    draft.name = name
    await update.message.reply_text(
        f"✅ Name: {name}\n\n"
        "How many tokens should be issued in total?\n"
        "Example: 1000000000"
    )
    return ConversationState.WAITING_SUPPLY


async def receive_supply(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving total token supply"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    try:
        supply = _parse_int(update.message.text)
    except ValueError:
        await update.message.reply_text("❌ Invalid format. Enter a whole number (e.g. 1000000000):")
        return ConversationState.WAITING_SUPPLY

    if supply <= 0:
        await update.message.reply_text("❌ Supply must be greater than 0. Try again:")
        return ConversationState.WAITING_SUPPLY

    draft.token_supply = supply
    await update.message.reply_text(
        f"✅ Supply: {supply:,}\n\n"
        f"How much XRP goes into the AMM pool? (minimum {settings.min_amm_xrp:g})\n"
        "Example: 50"
    )
    return ConversationState.WAITING_AMM_XRP


async def receive_amm_xrp(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving AMM XRP amount"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    try:
        amount = Decimal(update.message.text.strip())
    except InvalidOperation:
        await update.message.reply_text("❌ Invalid format. Enter a number (e.g. 50):")
        return ConversationState.WAITING_AMM_XRP

    if amount < Decimal(str(settings.min_amm_xrp)):
        await update.message.reply_text(
            f"❌ AMM XRP amount must be at least {settings.min_amm_xrp:g}. Try again:"
        )
        return ConversationState.WAITING_AMM_XRP

    draft.amm_xrp_amount = float(amount)
    await update.message.reply_text(
        f"✅ AMM pool: {format_xrp(draft.amm_xrp_amount)} XRP\n\n"
        f"What percent of the supply should be sent to you? (0-{MAX_CHECK_PERCENT})\n"
        "Send 0 to put everything in the pool."
    )
    return ConversationState.WAITING_CHECK_PERCENT


async def receive_check_percent(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving holder allocation percent"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    try:
        percent = Decimal(update.message.text.strip().rstrip("%"))
    except InvalidOperation:
        await update.message.reply_text(f"❌ Invalid format. Enter a number from 0 to {MAX_CHECK_PERCENT}:")
        return ConversationState.WAITING_CHECK_PERCENT

    if percent < 0 or percent > MAX_CHECK_PERCENT:
        await update.message.reply_text(f"❌ Percent must be between 0 and {MAX_CHECK_PERCENT}. Try again:")
        return ConversationState.WAITING_CHECK_PERCENT

    draft.check_percent = percent
    await update.message.reply_text(
        "👛 Send your XRPL wallet address (starts with r).\n"
        "It receives your allocation and any refund.\n\n"
        "Send `skip` to launch without one.",
        parse_mode='Markdown'
    )
    return ConversationState.WAITING_WALLET


async def receive_wallet(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving wallet address"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    text = update.message.text.strip()
    if text.lower() in SKIP_WORDS:
        draft.user_address = ""
    elif is_xrpl_address(text):
        draft.user_address = text
    else:
        await update.message.reply_text("❌ That is not a valid XRPL address. Try again or send skip:")
        return ConversationState.WAITING_WALLET

    await update.message.reply_text(
        f"📝 Send a short description of your token (up to {MAX_DESCRIPTION_LENGTH} characters).\n\n"
        "Send `skip` to leave it empty.",
        parse_mode='Markdown'
    )
    return ConversationState.WAITING_DESCRIPTION


async def receive_description(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving optional token description"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    text = update.message.text.strip()
    if text.lower() in SKIP_WORDS:
        draft.description = ""
    elif len(text) > MAX_DESCRIPTION_LENGTH:
        await update.message.reply_text(
            f"❌ Maximum {MAX_DESCRIPTION_LENGTH} characters, yours has {len(text)}. Try again or send skip:"
        )
        return ConversationState.WAITING_DESCRIPTION
    else:
        draft.description = text

    await update.message.reply_text(
        "🔗 Send your project links in one message:\n"
        "website (https://...), X account and Telegram group.\n"
        "Example: `https://doge.example @dogecoin t.me/dogecoin`\n\n"
        "Send `skip` if you have none.",
        parse_mode='Markdown'
    )
    return ConversationState.WAITING_LINKS


async def receive_links(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving optional website, X and Telegram links, then showing the summary"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    text = update.message.text.strip()
    links = {} if text.lower() in SKIP_WORDS else parse_links(text)
    draft.website = links.get("website", "")
    draft.twitter = links.get("twitter", "")
    draft.telegram = links.get("telegram", "")

    try:
        draft.to_request().validate(settings.min_amm_xrp)
    except LaunchValidationError as e:
        if e.field_name == "domain":
            await update.message.reply_text(
                f"❌ {draft.website} is not a valid website. "
                "Use the full address (https://...) or send skip:"
            )
            return ConversationState.WAITING_LINKS
        await update.message.reply_text(f"❌ {e.message}\nStart over with /launch")
        draft_storage.delete(telegram_id)
        return ConversationHandler.END

    summary = await _build_summary(telegram_id)
    await update.message.reply_text(
        summary,
        parse_mode='Markdown',
        reply_markup=get_confirmation_keyboard(draft.anti_snipe)
    )
    return ConversationState.CONFIRMING


async def _build_summary(telegram_id: int) -> str:
    """Summary text with the funding quote, if the service provides one"""
    draft = draft_storage.get(telegram_id)
    request = draft.to_request()

    quote_text = "💸 Cost estimate unavailable, it will be shown after launch."
    try:
        quote = await api.calculate_funding(
            amm_xrp_amount=request.amm_xrp_amount,
            anti_snipe=request.anti_snipe,
            token_supply=request.token_supply,
            user_check_amount=request.user_check_amount or 0,
            platform_retention_percent=request.platform_retention_percent
        )
        total = quote.get("totalRequired") or quote.get("requiredFunding") or quote.get("total")
        if total is not None:
            quote_text = f"💸 Estimated funding: *{format_xrp(float(total))} XRP*"
    except (LaunchAPIError, ValueError, TypeError) as e:
        logger.warning(f"Funding quote failed: {e}")

    wallet = draft.user_address or "not set"
    links = [link for link in (draft.website, draft.twitter, draft.telegram) if link]
    links_text = escape_markdown(", ".join(links), version=1) if links else "none"
    icon = "attached" if draft.image_data else "none (send a photo to attach one)"
    return (
        "📋 *Launch Summary*\n\n"
        f"🪙 Ticker: *{request.currency_code}*\n"
        f"🏷 Name: {escape_markdown(draft.name or '-', version=1)}\n"
        f"📦 Supply: {request.token_supply:,}\n"
        f"🏊 AMM pool: {format_xrp(request.amm_xrp_amount)} XRP + {request.amm_token_amount:,} tokens\n"
        f"🎁 Your allocation: {(request.user_check_amount or 0):,} tokens\n"
        f"👛 Wallet: `{escape_markdown(wallet, version=1)}`\n"
        f"🛡 Anti-snipe: {'ON' if request.anti_snipe else 'OFF'}\n"
        f"🔗 Links: {links_text}\n"
        f"🖼 Icon: {icon}\n\n"
        f"{quote_text}\n\n"
        "Press LAUNCH to submit."
    )


async def receive_icon(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Receiving a token icon photo while the summary is shown"""
    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await update.message.reply_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    try:
        photo_file = await update.message.photo[-1].get_file()
        data = await photo_file.download_as_bytearray()
        draft.image_data = "data:image/jpeg;base64," + base64.b64encode(bytes(data)).decode("ascii")
    except Exception as e:
        logger.error(f"Error downloading icon: {e}")
        await update.message.reply_text("❌ Could not read that image. Try another one or press LAUNCH.")
        return ConversationState.CONFIRMING

    summary = await _build_summary(telegram_id)
    await update.message.reply_text(
        summary,
        parse_mode='Markdown',
        reply_markup=get_confirmation_keyboard(draft.anti_snipe)
    )
    return ConversationState.CONFIRMING


async def toggle_anti_snipe(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle anti-snipe toggle button"""
    query = update.callback_query
    await query.answer()

    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await query.edit_message_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    draft.anti_snipe = not draft.anti_snipe
    summary = await _build_summary(telegram_id)
    try:
        await query.edit_message_text(
            summary,
            parse_mode='Markdown',
            reply_markup=get_confirmation_keyboard(draft.anti_snipe)
        )
    except BadRequest as e:
        if "not modified" not in str(e).lower():
            raise
    return ConversationState.CONFIRMING


async def confirm_launch(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle LAUNCH button press"""
    query = update.callback_query
    await query.answer("🚀 Submitting launch...")

    telegram_id = update.effective_user.id
    draft = draft_storage.get(telegram_id)
    if not draft:
        await query.edit_message_text("❌ Form expired. Start over with /launch")
        return ConversationHandler.END

    await query.edit_message_text("⏳ Submitting launch...")
    workflow = registry.get(telegram_id)
    try:
        await workflow.launch(
            draft.to_request(),
            user_wallet=draft.user_address or None,
            image_data=draft.image_data
        )
    except LaunchValidationError as e:
        await query.edit_message_text(f"❌ {e.message}\nStart over with /launch")
    except LaunchInProgressError:
        await query.edit_message_text(
            render_status(workflow),
            parse_mode='Markdown',
            reply_markup=get_status_keyboard(workflow.phase)
        )

    # The phase listener posts funding instructions or the failure reason
    draft_storage.delete(telegram_id)
    return ConversationHandler.END


async def cancel_draft(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle Cancel button press on the summary"""
    query = update.callback_query
    await query.answer()

    draft_storage.delete(update.effective_user.id)
    await query.edit_message_text(
        "❌ Launch cancelled.\n"
        "Use /launch to start over."
    )
    return ConversationHandler.END
