"""
Tests for bot handlers
Testing form input validation, launch confirmation and status rendering
"""

import pytest
from unittest.mock import AsyncMock, Mock, patch
from telegram.ext import ConversationHandler

from api_client import LaunchAPIError
from handlers.launch import (
    confirm_launch,
    receive_amm_xrp,
    receive_description,
    receive_links,
    receive_name,
    receive_supply,
    receive_ticker
)
from handlers.status import continue_launch, render_status, reset_command
from models import LaunchDraft, LogEntry, Session
from states import ConversationState, Phase
from workflow import LaunchWorkflow, funding_progress
from conftest import FakePolling, ISSUER


@pytest.fixture
def mock_update():
    """Mock telegram Update object"""
    update = Mock()
    update.effective_user = Mock()
    update.effective_user.id = 123456
    update.message = Mock()
    update.message.text = "DOGE"
    update.message.reply_text = AsyncMock()
    update.callback_query = Mock()
    update.callback_query.answer = AsyncMock()
    update.callback_query.edit_message_text = AsyncMock()
    return update


@pytest.fixture
def mock_context():
    """Mock telegram Context object"""
    context = Mock()
    context.user_data = {}
    return context


def make_workflow(phase, session=None):
    workflow = LaunchWorkflow(api=Mock(), store=Mock(), polling=FakePolling(), interval_ms=3000, chat_id=123456)
    workflow.phase = phase
    workflow.session = session
    return workflow


class TestFormInput:

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_ticker_xrp_rejected(self, mock_storage, mock_update, mock_context):
        draft = LaunchDraft()
        mock_storage.get.return_value = draft
        mock_update.message.text = "xrp"

        result = await receive_ticker(mock_update, mock_context)

        assert result == ConversationState.WAITING_TICKER
        assert "reserved" in mock_update.message.reply_text.call_args[0][0]
        assert draft.currency_code == ""

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_ticker_accepted(self, mock_storage, mock_update, mock_context):
        draft = LaunchDraft()
        mock_storage.get.return_value = draft
        mock_update.message.text = " doge "

        result = await receive_ticker(mock_update, mock_context)

        assert result == ConversationState.WAITING_NAME
        assert draft.currency_code == "DOGE"

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_name_too_long(self, mock_storage, mock_update, mock_context):
        draft = LaunchDraft(currency_code="DOGE")
        mock_storage.get.return_value = draft
        mock_update.message.text = "D" * 51

        result = await receive_name(mock_update, mock_context)

        assert result == ConversationState.WAITING_NAME
        assert draft.name == ""

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_name_accepted(self, mock_storage, mock_update, mock_context):
        draft = LaunchDraft(currency_code="DOGE")
        mock_storage.get.return_value = draft
        mock_update.message.text = "  Dogecoin "

        result = await receive_name(mock_update, mock_context)

        assert result == ConversationState.WAITING_SUPPLY
        assert draft.name == "Dogecoin"

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_supply_with_separators(self, mock_storage, mock_update, mock_context):
        draft = LaunchDraft(currency_code="DOGE")
        mock_storage.get.return_value = draft
        mock_update.message.text = "1,000,000"

        result = await receive_supply(mock_update, mock_context)

        assert result == ConversationState.WAITING_AMM_XRP
        assert draft.token_supply == 1_000_000

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_amm_amount_below_minimum(self, mock_storage, mock_update, mock_context):
        draft = LaunchDraft(currency_code="DOGE", token_supply=1000)
        mock_storage.get.return_value = draft
        mock_update.message.text = "5"

        result = await receive_amm_xrp(mock_update, mock_context)

        assert result == ConversationState.WAITING_AMM_XRP
        assert "at least 10" in mock_update.message.reply_text.call_args[0][0]

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_expired_form(self, mock_storage, mock_update, mock_context):
        mock_storage.get.return_value = None

        result = await receive_supply(mock_update, mock_context)

        assert result == ConversationHandler.END


class TestDetailsInput:

    @pytest.fixture
    def draft(self):
        return LaunchDraft(currency_code="DOGE", name="Dogecoin", token_supply=1000, amm_xrp_amount=50.0)

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_description_skipped(self, mock_storage, draft, mock_update, mock_context):
        mock_storage.get.return_value = draft
        mock_update.message.text = "skip"

        result = await receive_description(mock_update, mock_context)

        assert result == ConversationState.WAITING_LINKS
        assert draft.description == ""

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_description_too_long(self, mock_storage, draft, mock_update, mock_context):
        mock_storage.get.return_value = draft
        mock_update.message.text = "x" * 1001

        result = await receive_description(mock_update, mock_context)

        assert result == ConversationState.WAITING_DESCRIPTION
        assert "1000" in mock_update.message.reply_text.call_args[0][0]

    @pytest.mark.asyncio
    @patch('handlers.launch.api')
    @patch('handlers.launch.draft_storage')
    async def test_links_fill_draft_and_show_summary(self, mock_storage, mock_api, draft, mock_update, mock_context):
        mock_storage.get.return_value = draft
        mock_api.calculate_funding = AsyncMock(return_value={"totalRequired": 63.5})
        mock_update.message.text = "https://doge.example @dogecoin t.me/dogecoin"

        result = await receive_links(mock_update, mock_context)

        assert result == ConversationState.CONFIRMING
        assert draft.website == "https://doge.example"
        assert draft.twitter == "@dogecoin"
        assert draft.telegram == "t.me/dogecoin"
        summary = mock_update.message.reply_text.call_args[0][0]
        assert "Dogecoin" in summary
        assert "63.5 XRP" in summary

    @pytest.mark.asyncio
    @patch('handlers.launch.draft_storage')
    async def test_invalid_website_asks_again(self, mock_storage, draft, mock_update, mock_context):
        mock_storage.get.return_value = draft
        mock_update.message.text = "doge.example"

        result = await receive_links(mock_update, mock_context)

        assert result == ConversationState.WAITING_LINKS
        assert "not a valid website" in mock_update.message.reply_text.call_args[0][0]
        mock_storage.delete.assert_not_called()


class TestConfirmLaunch:

    @pytest.mark.asyncio
    @patch('handlers.launch.registry')
    @patch('handlers.launch.draft_storage')
    async def test_confirm_submits_draft(self, mock_storage, mock_registry, mock_update, mock_context):
        draft = LaunchDraft(
            currency_code="DOGE",
            name="Dogecoin",
            token_supply=1000,
            amm_xrp_amount=50.0,
            website="https://doge.example"
        )
        mock_storage.get.return_value = draft
        workflow = Mock()
        workflow.launch = AsyncMock(return_value=Phase.FUNDING)
        mock_registry.get.return_value = workflow

        result = await confirm_launch(mock_update, mock_context)

        assert result == ConversationHandler.END
        request = workflow.launch.call_args[0][0]
        assert request.currency_code == "DOGE"
        assert request.token_supply == 1000
        assert request.name == "Dogecoin"
        assert request.to_payload()["domain"] == "doge.example"
        mock_storage.delete.assert_called_once_with(123456)


class TestStatusButtons:

    @pytest.mark.asyncio
    @patch('handlers.status.registry')
    async def test_continue_failure_keeps_phase(self, mock_registry, mock_update, mock_context):
        api = Mock()
        api.continue_launch = AsyncMock(side_effect=LaunchAPIError("Not stalled"))
        workflow = LaunchWorkflow(api=api, store=Mock(), polling=FakePolling(), interval_ms=3000)
        workflow.phase = Phase.PROCESSING
        workflow.session = Session(session_id="s1", status="creating_amm")
        mock_registry.get.return_value = workflow

        await continue_launch(mock_update, mock_context)

        assert workflow.phase is Phase.PROCESSING
        text = mock_update.callback_query.edit_message_text.call_args[0][0]
        assert "Not stalled" in text

    @pytest.mark.asyncio
    @patch('handlers.status.registry')
    async def test_reset_refused_while_running(self, mock_registry, mock_update, mock_context):
        workflow = Mock()
        workflow.phase = Phase.FUNDING
        mock_registry.get.return_value = workflow

        await reset_command(mock_update, mock_context)

        workflow.reset.assert_not_called()
        assert "still running" in mock_update.message.reply_text.call_args[0][0]


class TestRenderStatus:

    def test_idle(self):
        assert "/launch" in render_status(make_workflow(Phase.IDLE))

    def test_partial_funding(self):
        workflow = make_workflow(
            Phase.FUNDING,
            Session(session_id="s1", status="awaiting_funding", issuer_address=ISSUER, required_funding=20)
        )
        workflow.funding = funding_progress({"currentBalance": 12, "requiredBalance": 20})

        text = render_status(workflow)

        assert ISSUER in text
        assert "(60%)" in text
        assert "8 XRP still missing" in text

    def test_processing_shows_recent_logs(self):
        workflow = make_workflow(Phase.PROCESSING, Session(session_id="s1", status="creating_amm"))
        workflow.logs = [LogEntry(str(i), "info", f"step {i}") for i in range(8)]

        text = render_status(workflow)

        assert "creating_amm" in text
        assert "step 7" in text
        assert "step 2" not in text

    def test_completed_with_check(self):
        workflow = make_workflow(
            Phase.COMPLETED,
            Session(session_id="s1", status="success", issuer_address=ISSUER, user_check_id="ABCDEF0123456789ABCDEF")
        )

        text = render_status(workflow)

        assert "Token launched" in text
        assert "ABCDEF01...CDEF" in text

    def test_error_message(self):
        workflow = make_workflow(Phase.ERROR)
        workflow.error = "Failed to initialize token launch"

        assert "Failed to initialize token launch" in render_status(workflow)
