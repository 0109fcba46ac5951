"""Launch request and session snapshot models"""

import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from utils import strip_url_scheme

CURRENCY_CODE_RE = re.compile(r"^[A-Za-z0-9]{3,15}$")
XRPL_ADDRESS_RE = re.compile(r"^r[1-9A-HJ-NP-Za-km-z]{24,34}$")
WEBSITE_RE = re.compile(r"^https?://.+\..+", re.IGNORECASE)

MIN_AMM_XRP = 10
MAX_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 1000
ORIGIN = "xrpl.to"


class LaunchValidationError(ValueError):
    """Launch form rejected before any network call"""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field_name = field_name
        self.message = message


def is_xrpl_address(value: str) -> bool:
    return bool(XRPL_ADDRESS_RE.match(value or ""))


def validate_currency_code(code: str) -> str:
    """Return the upper-cased ticker or raise LaunchValidationError"""
    code = (code or "").strip()
    if not CURRENCY_CODE_RE.match(code):
        raise LaunchValidationError(
            "currency_code", "Ticker must be 3-15 letters or numbers"
        )
    if code.upper() == "XRP":
        raise LaunchValidationError("currency_code", "XRP is reserved")
    return code.upper()


@dataclass(frozen=True)
class LaunchRequest:
    """Everything the launch service needs to start an issuance"""
    currency_code: str
    token_supply: int
    amm_xrp_amount: float
    user_address: Optional[str] = None
    user_check_amount: Optional[int] = None
    domain: Optional[str] = None
    anti_snipe: bool = False
    name: Optional[str] = None
    description: Optional[str] = None
    platform_retention_percent: int = 0
    twitter: Optional[str] = None
    telegram: Optional[str] = None

    @property
    def amm_token_amount(self) -> int:
        """Tokens left for the AMM pool after the holder check"""
        return self.token_supply - (self.user_check_amount or 0)

    def validate(self, min_amm_xrp: float = MIN_AMM_XRP) -> "LaunchRequest":
        """
        Check the request and return it unchanged

        Raises:
            LaunchValidationError: on the first invalid field
        """
        validate_currency_code(self.currency_code)
        if not isinstance(self.token_supply, int) or self.token_supply <= 0:
            raise LaunchValidationError("token_supply", "Token supply must be greater than 0")
        if self.amm_xrp_amount is None or self.amm_xrp_amount < min_amm_xrp:
            raise LaunchValidationError(
                "amm_xrp_amount", f"AMM XRP amount must be at least {min_amm_xrp:g}"
            )
        if self.user_check_amount is not None:
            if self.user_check_amount < 0 or self.user_check_amount > self.token_supply:
                raise LaunchValidationError(
                    "user_check_amount", "Holder allocation cannot exceed token supply"
                )
        if self.user_address and not is_xrpl_address(self.user_address):
            raise LaunchValidationError("user_address", "Invalid XRPL address")
        if self.name is not None and not self.name.strip():
            raise LaunchValidationError("name", "Token name is required")
        if self.name is not None and len(self.name) > MAX_NAME_LENGTH:
            raise LaunchValidationError("name", f"Maximum {MAX_NAME_LENGTH} characters")
        if self.description is not None and len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise LaunchValidationError("description", f"Maximum {MAX_DESCRIPTION_LENGTH} characters")
        if self.domain and not WEBSITE_RE.match(self.domain):
            raise LaunchValidationError("domain", "Enter a valid URL")
        if not 0 <= self.platform_retention_percent <= 10:
            raise LaunchValidationError(
                "platform_retention_percent", "Platform retention must be between 0 and 10"
            )
        return self

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the start call, leaving out absent optional fields"""
        payload: Dict[str, Any] = {
            "currencyCode": self.currency_code.upper(),
            "tokenSupply": str(self.token_supply),
            "ammTokenAmount": str(self.amm_token_amount),
            "ammXrpAmount": self.amm_xrp_amount,
            "origin": ORIGIN,
            "platformRetentionPercent": self.platform_retention_percent
        }
        if self.name:
            payload["name"] = self.name
            payload["user"] = self.name
        if self.user_address:
            payload["userAddress"] = self.user_address
        if self.user_check_amount:
            payload["userCheckAmount"] = str(self.user_check_amount)
        if self.domain:
            payload["domain"] = strip_url_scheme(self.domain)
        if self.description:
            payload["description"] = self.description
        if self.telegram:
            payload["telegram"] = self.telegram
        if self.twitter:
            payload["twitter"] = self.twitter
        if self.anti_snipe:
            payload["antiSnipe"] = True
        return payload


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    message: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        return cls(
            timestamp=str(data.get("timestamp", "")),
            level=str(data.get("level", "info")),
            message=str(data.get("message", ""))
        )

    def to_dict(self) -> Dict[str, str]:
        return {"timestamp": self.timestamp, "level": self.level, "message": self.message}


def _number(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Session:
    """Last known copy of the service-owned launch record"""
    session_id: str
    status: str
    issuer_address: Optional[str] = None
    holder_address: Optional[str] = None
    amm_address: Optional[str] = None
    user_check_id: Optional[str] = None
    required_funding: float = 0.0
    current_balance: float = 0.0
    logs: List[LogEntry] = field(default_factory=list)
    error: Optional[str] = None
    funding_status: Optional[Dict[str, Any]] = None
    progress: Optional[float] = None
    progress_message: Optional[str] = None

    @classmethod
    def from_start_response(cls, data: Dict[str, Any]) -> "Session":
        if not isinstance(data, dict):
            raise ValueError(f"Launch service response is not an object: {type(data).__name__}")
        session_id = data.get("sessionId")
        if not session_id:
            raise ValueError("Launch service response has no sessionId")
        return cls(
            session_id=str(session_id),
            status=str(data.get("status") or "awaiting_funding"),
            issuer_address=data.get("issuerAddress") or data.get("issuer"),
            required_funding=_number(data.get("requiredFunding"))
        )

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Session":
        """Rebuild from a persisted record"""
        return cls(
            session_id=str(record["sessionId"]),
            status=str(record.get("status") or ""),
            issuer_address=record.get("issuerAddress"),
            holder_address=record.get("holderAddress"),
            amm_address=record.get("ammAddress"),
            user_check_id=record.get("userCheckId"),
            required_funding=_number(record.get("requiredFunding")),
            current_balance=_number(record.get("currentBalance")),
            logs=[LogEntry.from_dict(entry) for entry in record.get("logs") or [] if isinstance(entry, dict)],
            error=record.get("error"),
            funding_status=record.get("fundingStatus"),
            progress=record.get("progress"),
            progress_message=record.get("progressMessage")
        )

    def apply_snapshot(self, snapshot: Dict[str, Any]) -> "Session":
        """
        Return a copy updated from a status snapshot

        Fields missing from the snapshot keep their last known value, except
        logs, which are replaced whenever the snapshot carries them.
        """
        changes: Dict[str, Any] = {}
        if snapshot.get("status"):
            changes["status"] = str(snapshot["status"])
        issuer = snapshot.get("issuerAddress") or snapshot.get("issuer")
        if issuer:
            changes["issuer_address"] = issuer
        for key, attr in (
            ("holderAddress", "holder_address"),
            ("ammAddress", "amm_address"),
            ("userCheckId", "user_check_id"),
            ("progressMessage", "progress_message")
        ):
            if snapshot.get(key):
                changes[attr] = snapshot[key]
        if snapshot.get("progress") is not None:
            changes["progress"] = _number(snapshot["progress"])
        if snapshot.get("requiredFunding") is not None:
            changes["required_funding"] = _number(snapshot["requiredFunding"])
        if "logs" in snapshot and isinstance(snapshot["logs"], list):
            changes["logs"] = [LogEntry.from_dict(entry) for entry in snapshot["logs"] if isinstance(entry, dict)]
        if "error" in snapshot:
            changes["error"] = snapshot["error"]

        funding = snapshot.get("fundingStatus")
        if isinstance(funding, dict):
            changes["funding_status"] = funding
            if funding.get("currentBalance") is not None:
                changes["current_balance"] = _number(funding["currentBalance"])
            if funding.get("requiredBalance") is not None and not changes.get("required_funding"):
                changes["required_funding"] = _number(funding["requiredBalance"])
        elif snapshot.get("currentBalance") is not None:
            changes["current_balance"] = _number(snapshot["currentBalance"])

        return replace(self, **changes)

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "sessionId": self.session_id,
            "status": self.status,
            "requiredFunding": self.required_funding,
            "currentBalance": self.current_balance,
            "logs": [entry.to_dict() for entry in self.logs]
        }
        optional = {
            "issuerAddress": self.issuer_address,
            "holderAddress": self.holder_address,
            "ammAddress": self.amm_address,
            "userCheckId": self.user_check_id,
            "error": self.error,
            "fundingStatus": self.funding_status,
            "progress": self.progress,
            "progressMessage": self.progress_message
        }
        record.update({key: value for key, value in optional.items() if value is not None})
        return record
