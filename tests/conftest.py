"""Shared fixtures for launch workflow tests"""

import asyncio
import pytest
from unittest.mock import AsyncMock, Mock

from models import LaunchRequest, SessionStore

WALLET = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"
ISSUER = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"
SESSION_ID = "sess-1"


class FakePolling:
    """Records arm/cancel calls instead of running a timer"""

    def __init__(self):
        self.events = []
        self.on_tick = None
        self.active = False

    def start(self, interval_ms, on_tick, name="poll"):
        self.events.append(("arm", name.split("-")[0]))
        self.on_tick = on_tick
        self.active = True

    def cancel(self):
        if self.active:
            self.events.append("cancel")
            self.active = False


class TickGate:
    """Sleep replacement that returns only when the test releases a tick"""

    def __init__(self):
        self.intervals = []
        self._release = asyncio.Semaphore(0)

    async def sleep(self, seconds):
        self.intervals.append(seconds)
        await self._release.acquire()

    def release(self):
        self._release.release()


async def drain():
    """Let pending tasks run until they block again"""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def store(tmp_path):
    return SessionStore(tmp_path / "sessions" / "123456.json")


@pytest.fixture
def polling():
    return FakePolling()


@pytest.fixture
def mock_api():
    api = Mock()
    api.start_launch = AsyncMock(return_value={
        "sessionId": SESSION_ID,
        "issuerAddress": ISSUER,
        "requiredFunding": 20,
        "status": "awaiting_funding"
    })
    api.get_status = AsyncMock()
    api.continue_launch = AsyncMock(return_value={"ok": True})
    api.cancel_launch = AsyncMock(return_value={"ok": True})
    api.upload_image = AsyncMock(return_value={"ok": True})
    return api


@pytest.fixture
def launch_request():
    return LaunchRequest(
        currency_code="DOGE",
        token_supply=1_000_000,
        amm_xrp_amount=50,
        user_address=WALLET,
        user_check_amount=100_000
    )
