"""Launch form draft model"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from utils import percent_of_supply
from .launch import LaunchRequest


@dataclass
class LaunchDraft:
    """Temporary storage for the launch form while the user fills it in"""
    currency_code: str = ""
    name: str = ""
    token_supply: int = 0
    amm_xrp_amount: float = 0.0
    user_address: str = ""
    check_percent: Decimal = Decimal(0)
    anti_snipe: bool = False
    description: str = ""
    website: str = ""
    twitter: str = ""
    telegram: str = ""
    image_data: Optional[str] = None  # base64 data URL of the token icon

    def to_request(self) -> LaunchRequest:
        check_amount = percent_of_supply(self.token_supply, self.check_percent) if self.check_percent else None
        return LaunchRequest(
            currency_code=self.currency_code,
            token_supply=self.token_supply,
            amm_xrp_amount=self.amm_xrp_amount,
            user_address=self.user_address or None,
            user_check_amount=check_amount,
            anti_snipe=self.anti_snipe,
            name=self.name or None,
            description=self.description or None,
            domain=self.website or None,
            twitter=self.twitter or None,
            telegram=self.telegram or None
        )


class DraftStorage:
    """In-memory storage for launch drafts"""

    def __init__(self):
        self._drafts: dict[int, LaunchDraft] = {}

    def get(self, telegram_id: int) -> LaunchDraft | None:
        """Get draft by telegram ID"""
        return self._drafts.get(telegram_id)

    def create(self, telegram_id: int) -> LaunchDraft:
        """Create new draft, replacing any previous one"""
        draft = LaunchDraft()
        self._drafts[telegram_id] = draft
        return draft

    def delete(self, telegram_id: int) -> None:
        """Delete draft"""
        if telegram_id in self._drafts:
            del self._drafts[telegram_id]

    def exists(self, telegram_id: int) -> bool:
        """Check if draft exists"""
        return telegram_id in self._drafts


draft_storage = DraftStorage()
