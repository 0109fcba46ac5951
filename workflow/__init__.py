"""Workflow module exports"""

from .funding import FundingProgress, funding_progress
from .polling import PollHandle, PollingLoop
from .machine import LaunchWorkflow, LaunchInProgressError, FUNDING_COMPLETE_MESSAGE
from .recovery import recover_session, recover_all
from .registry import WorkflowRegistry, registry

__all__ = [
    'FundingProgress',
    'funding_progress',
    'PollHandle',
    'PollingLoop',
    'LaunchWorkflow',
    'LaunchInProgressError',
    'FUNDING_COMPLETE_MESSAGE',
    'recover_session',
    'recover_all',
    'WorkflowRegistry',
    'registry'
]
