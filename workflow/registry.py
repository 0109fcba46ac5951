"""Per-chat launch workflows"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional

from api_client import LaunchAPI, api
from config import settings
from models import store_for_chat
from states import Phase
from .machine import LaunchWorkflow, Listener

logger = logging.getLogger(__name__)


class WorkflowRegistry:
    """One LaunchWorkflow per chat, each with its own session file"""

    def __init__(self, api: LaunchAPI, session_dir: Path, interval_ms: int,
                 listener: Optional[Listener] = None):
        self.api = api
        self.session_dir = Path(session_dir)
        self.interval_ms = interval_ms
        self.listener = listener
        self._workflows: Dict[int, LaunchWorkflow] = {}

    def get(self, telegram_id: int) -> LaunchWorkflow:
        workflow = self._workflows.get(telegram_id)
        if workflow is None:
            workflow = LaunchWorkflow(
                api=self.api,
                store=store_for_chat(self.session_dir, telegram_id),
                interval_ms=self.interval_ms,
                listener=self._dispatch,
                chat_id=telegram_id
            )
            self._workflows[telegram_id] = workflow
        return workflow

    async def _dispatch(self, workflow: LaunchWorkflow, previous: Phase) -> None:
        # listener is attached in post_init
        if self.listener is not None:
            await self.listener(workflow, previous)

    def persisted_chat_ids(self) -> List[int]:
        """Chat IDs that have a stored launch on disk"""
        if not self.session_dir.is_dir():
            return []
        chat_ids = []
        for path in sorted(self.session_dir.glob("*.json")):
            try:
                chat_ids.append(int(path.stem))
            except ValueError:
                logger.warning(f"Ignoring unexpected file in session dir: {path.name}")
        return chat_ids

    async def shutdown(self) -> None:
        """Stop every poll loop and wait for in-flight ticks. Stored records stay for the next start."""
        tasks = []
        for workflow in self._workflows.values():
            handle = workflow.polling.handle
            workflow.teardown()
            if handle is not None and handle.task is not None:
                tasks.append(handle.task)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"Stopped {len(tasks)} poll loop(s)")


registry = WorkflowRegistry(api, Path(settings.session_dir), settings.poll_interval_ms)
