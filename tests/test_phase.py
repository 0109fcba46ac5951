"""Tests for the status to phase mapping"""

import pytest

from states import Phase, phase_for_status, is_terminal


class TestPhaseForStatus:

    @pytest.mark.parametrize("status", [
        "funded",
        "configuring_issuer",
        "registering_token",
        "creating_trustline",
        "sending_tokens",
        "creating_checks",
        "creating_amm",
        "scheduling_blackhole",
    ])
    def test_processing_statuses(self, status):
        assert phase_for_status(status) is Phase.PROCESSING

    @pytest.mark.parametrize("status", ["success", "completed"])
    def test_success_statuses(self, status):
        assert phase_for_status(status) is Phase.COMPLETED

    @pytest.mark.parametrize("status", ["failed", "funding_timeout", "cancelled"])
    def test_failure_statuses(self, status):
        assert phase_for_status(status) is Phase.ERROR

    @pytest.mark.parametrize("status", ["awaiting_funding", "pending", "something_new", "", None])
    def test_unknown_status_stays_in_funding(self, status):
        assert phase_for_status(status) is Phase.FUNDING

    def test_mapping_is_idempotent(self):
        first = phase_for_status("creating_amm")
        second = phase_for_status("creating_amm")
        assert first is second is Phase.PROCESSING

    def test_status_case_and_whitespace_ignored(self):
        assert phase_for_status(" Creating_AMM ") is Phase.PROCESSING

    def test_terminal_phases(self):
        assert is_terminal(Phase.COMPLETED)
        assert is_terminal(Phase.ERROR)
        assert not is_terminal(Phase.FUNDING)
        assert not is_terminal(Phase.PROCESSING)
