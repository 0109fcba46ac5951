"""Durable storage for the one in-flight launch of a chat"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .launch import Session

logger = logging.getLogger(__name__)

STORAGE_KEY = "tokenLaunchSession"


class SessionStore:
    """
    Single-record JSON store.

    The record lives under one fixed key, so saving a new launch replaces
    whatever was stored before. Nothing else in the bot reads or writes the
    file directly.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def save(self, session: Session, user_wallet: Optional[str]) -> None:
        """Overwrite the stored record with the latest known session"""
        record = session.to_record()
        record["userWallet"] = user_wallet or ""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps({STORAGE_KEY: record}, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)

    def load(self) -> Optional[Dict[str, Any]]:
        """
        Return the stored record, or None

        A corrupt record is removed and reported as absent.
        """
        if not self.path.exists():
            return None
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
            record = document[STORAGE_KEY]
            if not isinstance(record, dict) or not record.get("sessionId"):
                raise ValueError("record has no sessionId")
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable launch session at {self.path}: {e}")
            self.clear()
            return None
        return record

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


def store_for_chat(session_dir: Path, telegram_id: int) -> SessionStore:
    return SessionStore(Path(session_dir) / f"{telegram_id}.json")
