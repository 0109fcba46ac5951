"""Launch workflow state machine"""

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from api_client import LaunchAPI, LaunchAPIError
from config import settings
from models import LaunchRequest, LogEntry, Session, SessionStore
from states import Phase, phase_for_status
from .funding import FundingProgress, funding_progress
from .polling import PollingLoop

logger = logging.getLogger(__name__)

FUNDING_COMPLETE_MESSAGE = "Funding complete! Waiting for the launch service to continue..."

Listener = Callable[["LaunchWorkflow", Phase], Awaitable[None]]


class LaunchInProgressError(RuntimeError):
    """A new launch was requested while another one is still tracked"""


class LaunchWorkflow:
    """
    Drives one launch from submission to a terminal phase.

    The phase is always derived from the last status the service reported.
    Every phase change arms or cancels the poll loop in the same step, so at
    most one loop runs at a time. Each arm or cancel bumps ``_epoch``; a poll
    response that comes back under an older epoch is dropped, and so is one
    sent before the last response that was applied.
    """

    def __init__(
        self,
        api: LaunchAPI,
        store: SessionStore,
        polling: Optional[PollingLoop] = None,
        interval_ms: Optional[int] = None,
        listener: Optional[Listener] = None,
        chat_id: Optional[int] = None
    ):
        self.api = api
        self.store = store
        self.polling = polling or PollingLoop()
        self.interval_ms = interval_ms or settings.poll_interval_ms
        self.listener = listener
        self.chat_id = chat_id

        self.phase = Phase.IDLE
        self.session: Optional[Session] = None
        self.user_wallet: Optional[str] = None
        self.error: Optional[str] = None
        self.notice: Optional[str] = None
        self.funding: Optional[FundingProgress] = None
        self.logs: List[LogEntry] = []
        self._epoch = 0
        self._requests = 0
        self._applied = 0

    # User events

    async def launch(self, request: LaunchRequest, user_wallet: Optional[str] = None,
                     image_data: Optional[str] = None) -> Phase:
        """
        Submit a launch and start watching it.

        Raises:
            LaunchValidationError: request rejected locally, nothing sent
            LaunchInProgressError: another launch is still tracked
        """
        if self.phase is not Phase.IDLE:
            raise LaunchInProgressError(f"Launch already tracked in phase {self.phase.value}")
        request.validate()

        self.error = None
        self.notice = None
        self.logs = []
        self.funding = None
        await self._transition(Phase.INITIALIZING)

        try:
            data = await self.api.start_launch(request.to_payload())
            session = Session.from_start_response(data)
        except LaunchAPIError as e:
            logger.error(f"Launch start failed: {e.message}")
            self.error = e.message
            await self._transition(Phase.ERROR)
            return self.phase
        except ValueError as e:
            logger.error(f"Launch start returned an unusable response: {e}")
            self.error = "Failed to initialize token launch"
            await self._transition(Phase.ERROR)
            return self.phase

        self.session = session
        self.user_wallet = user_wallet or request.user_address
        try:
            self.store.save(session, self.user_wallet)
        except OSError as e:
            logger.error(f"Could not store launch session {session.session_id}: {e}")
            self.error = f"Launch {session.session_id} started but could not be saved"
            await self._transition(Phase.ERROR)
            return self.phase
        logger.info(f"Launch session {session.session_id} created, status {session.status}")

        if image_data:
            try:
                await self.api.upload_image(session.session_id, image_data)
            except LaunchAPIError as e:
                logger.warning(f"Icon upload for {session.session_id} failed: {e.message}")
                self.notice = "Icon upload failed, the launch continues without it."

        await self._transition(phase_for_status(session.status))
        return self.phase

    async def continue_launch(self) -> bool:
        """Nudge a stalled launch. Never changes the phase."""
        if self.session is None:
            self.notice = "No active launch to continue."
            return False
        try:
            await self.api.continue_launch(self.session.session_id, self.user_wallet)
        except LaunchAPIError as e:
            logger.warning(f"Continue for {self.session.session_id} failed: {e.message}")
            self.notice = e.message
            return False
        self.notice = "Continue requested. Status will update on the next check."
        return True

    async def cancel_launch(self) -> bool:
        """Ask the service to cancel and refund, then reset locally either way"""
        if self.session is None:
            self.reset()
            return False
        cancelled = True
        try:
            await self.api.cancel_launch(self.session.session_id, self.user_wallet)
            self.notice = "Launch cancelled."
        except LaunchAPIError as e:
            logger.warning(f"Cancel for {self.session.session_id} failed: {e.message}")
            self.notice = e.message
            cancelled = False
        notice = self.notice
        self.reset()
        self.notice = notice
        return cancelled

    def reset(self) -> None:
        """Forget the tracked launch and clear the stored record"""
        self._disarm()
        self.store.clear()
        self.phase = Phase.IDLE
        self.session = None
        self.user_wallet = None
        self.error = None
        self.notice = None
        self.funding = None
        self.logs = []
        logger.info(f"Launch state reset for chat {self.chat_id}")

    def teardown(self) -> None:
        """Stop polling without touching the stored record"""
        self._disarm()

    # Status handling

    def restore(self, record: Dict[str, Any]) -> Session:
        """Load a persisted record as the last known session, phase untouched"""
        self.session = Session.from_record(record)
        self.user_wallet = record.get("userWallet") or None
        self.logs = list(self.session.logs)
        return self.session

    async def poll_once(self) -> None:
        """
        One poll tick. Network errors propagate to the poll loop, which logs
        them and keeps the current phase.
        """
        if self.session is None:
            return
        self._requests += 1
        seq, epoch, session_id = self._requests, self._epoch, self.session.session_id
        snapshot = await self.api.get_status(session_id)
        if epoch != self._epoch or self.session is None or self.session.session_id != session_id:
            logger.debug(f"Dropping stale status for session {session_id}")
            return
        # a Refresh and a tick can overlap; only the newest request may land
        if seq < self._applied:
            logger.debug(f"Dropping out-of-order status for session {session_id}")
            return
        self._applied = seq
        await self.apply_snapshot(snapshot)

    async def apply_snapshot(self, snapshot: Dict[str, Any]) -> Phase:
        if self.session is None:
            raise RuntimeError("No launch session to update")
        self.session = self.session.apply_snapshot(snapshot)
        phase = phase_for_status(self.session.status)

        self.logs = list(self.session.logs)
        if self.session.funding_status is not None:
            self.funding = funding_progress(self.session.funding_status)
            if self.funding.sufficient and phase is Phase.FUNDING:
                self.logs.append(LogEntry(
                    timestamp=datetime.now(timezone.utc).isoformat(),
                    level="success",
                    message=FUNDING_COMPLETE_MESSAGE
                ))

        if phase is Phase.ERROR:
            self.error = self.session.error or f"Launch {self.session.status}"
        else:
            self.error = None

        self.store.save(self.session, self.user_wallet)
        await self._transition(phase)
        return self.phase

    # Internals

    async def _transition(self, phase: Phase) -> None:
        previous = self.phase
        if phase is previous:
            return
        self.phase = phase
        if phase in (Phase.FUNDING, Phase.PROCESSING):
            self._arm(phase)
        else:
            self._disarm()
        session_id = self.session.session_id if self.session else "-"
        logger.info(f"Launch {session_id}: {previous.value} -> {phase.value}")
        await self._notify(previous)

    def _arm(self, phase: Phase) -> None:
        self.polling.cancel()
        self._epoch += 1
        self.polling.start(self.interval_ms, self.poll_once, name=f"{phase.value}-{self.chat_id}")

    def _disarm(self) -> None:
        self._epoch += 1
        self.polling.cancel()

    async def _notify(self, previous: Phase) -> None:
        if self.listener is None:
            return
        try:
            await self.listener(self, previous)
        except Exception as e:
            logger.error(f"Phase listener failed for chat {self.chat_id}: {e}")
