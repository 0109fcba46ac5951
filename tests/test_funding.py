"""Tests for funding progress computation"""

import pytest

from workflow import funding_progress


class TestFundingProgress:

    def test_partial_funding(self):
        progress = funding_progress({"currentBalance": 12, "requiredBalance": 20})

        assert progress.progress_percent == pytest.approx(60.0)
        assert progress.shortfall == pytest.approx(8.0)
        assert progress.sufficient is False
        assert progress.partially_funded is True

    def test_exactly_funded(self):
        progress = funding_progress({"currentBalance": 20, "requiredBalance": 20, "sufficient": True})

        assert progress.sufficient is True
        assert progress.progress_percent == pytest.approx(100.0)
        assert progress.shortfall == 0

    def test_sufficiency_computed_when_missing(self):
        assert funding_progress({"currentBalance": 20, "requiredBalance": 20}).sufficient is True

    def test_overfunding_is_clamped(self):
        progress = funding_progress({"currentBalance": 35, "requiredBalance": 20})

        assert progress.progress_percent == pytest.approx(100.0)
        assert progress.shortfall == 0

    @pytest.mark.parametrize("funding_status", [
        {"currentBalance": 5, "requiredBalance": 0},
        {"currentBalance": 5},
        {},
        None,
    ])
    def test_zero_or_missing_requirement(self, funding_status):
        progress = funding_progress(funding_status)

        assert progress.progress_percent == 0
        assert progress.sufficient is False

    def test_service_flags_are_respected(self):
        progress = funding_progress({
            "currentBalance": 12,
            "requiredBalance": 20,
            "sufficient": False,
            "partiallyFunded": False
        })

        assert progress.partially_funded is False

    def test_progress_is_monotone_and_clamped(self):
        required = 20
        previous = -1.0
        for current in [-5, 0, 1, 7.5, 12, 19.99, 20, 21, 100]:
            percent = funding_progress({"currentBalance": current, "requiredBalance": required}).progress_percent
            assert 0 <= percent <= 100
            assert percent >= previous
            previous = percent

    def test_string_amounts(self):
        progress = funding_progress({"currentBalance": "5", "requiredBalance": "20"})

        assert progress.progress_percent == pytest.approx(25.0)
