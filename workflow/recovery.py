"""Resynchronise persisted launches after a restart"""

import logging
from typing import Dict

from api_client import LaunchAPIError
from states import Phase
from .machine import LaunchWorkflow

logger = logging.getLogger(__name__)


async def recover_session(workflow: LaunchWorkflow) -> Phase:
    """
    Resume a stored launch, if there is one.

    The phase comes from one immediate status fetch, never from the stored
    status, and the poller is armed only after that. When the fetch fails or its
    snapshot cannot be applied, the stored status is used and the poller picks up the real one on its next
    tick.
    """
    record = workflow.store.load()
    if record is None:
        return workflow.phase

    session = workflow.restore(record)
    try:
        snapshot = await workflow.api.get_status(session.session_id)
        phase = await workflow.apply_snapshot(snapshot)
    except LaunchAPIError as e:
        logger.warning(f"Recovery fetch for {session.session_id} failed, using stored status: {e.message}")
        phase = await workflow.apply_snapshot({})
    except Exception as e:
        logger.error(f"Unusable status for {session.session_id} during recovery, using stored status: {e}")
        phase = await workflow.apply_snapshot({})
    logger.info(f"Recovered launch {session.session_id} in phase {phase.value}")
    return phase


async def recover_all(registry) -> Dict[int, Phase]:
    """Run recovery for every chat with a stored launch"""
    recovered: Dict[int, Phase] = {}
    for telegram_id in registry.persisted_chat_ids():
        workflow = registry.get(telegram_id)
        try:
            recovered[telegram_id] = await recover_session(workflow)
        except Exception as e:
            logger.error(f"Failed to recover launch for chat {telegram_id}: {e}")
    return recovered
