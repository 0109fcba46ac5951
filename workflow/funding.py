"""Funding progress derived from a status snapshot"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class FundingProgress:
    current_balance: float
    required_balance: float
    progress_percent: float
    shortfall: float
    sufficient: bool
    partially_funded: bool


def _amount(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def funding_progress(funding_status: Optional[Dict[str, Any]]) -> FundingProgress:
    """
    Compute the funding view for a ``fundingStatus`` block.

    Reaching sufficiency does not move the launch forward on its own; only a
    later processing status from the service does.
    """
    data = funding_status or {}
    current = _amount(data.get("currentBalance"))
    required = _amount(data.get("requiredBalance"))

    if required > 0:
        percent = min(max(current / required * 100, 0.0), 100.0)
    else:
        percent = 0.0

    sufficient = data.get("sufficient")
    if sufficient is None:
        sufficient = required > 0 and current >= required
    partially_funded = data.get("partiallyFunded")
    if partially_funded is None:
        partially_funded = 0 < current < required

    return FundingProgress(
        current_balance=current,
        required_balance=required,
        progress_percent=percent,
        shortfall=max(required - current, 0.0),
        sufficient=bool(sufficient),
        partially_funded=bool(partially_funded)
    )
