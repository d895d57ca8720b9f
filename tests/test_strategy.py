"""Proposal strategy tests: per-strategy pay targets, confidence, rationale, and the no-data case."""

from __future__ import annotations

import pytest

from engines.strategy import Strategy, empty_proposal, generate_proposal, is_empty


@pytest.fixture
def offer_50pct() -> dict:
    """Offer 50% above the engineer's 2.2M CTC with a 2.8M base."""
    return {"basePay": 2_800_000, "variablePay": 500_000, "ctc": 3_300_000}


class TestCompetitiveStrategy:
    """REQUIREMENT: Competitive raises base by 90% of the offer increase, capped at 25%.

    WHO: HR analysts on the default strategy
    WHAT: base = min(salary * (1 + min(inc*0.9, 25)/100), range.max * 1.1);
          variable % = range variable %; risk medium; base confidence 85
    WHY: The default recommendation has to be predictable for HR to trust it
    """

    def test_forty_percent_offer_caps_raise_at_twenty_five_percent(
        self, engineer, senior_range, offer_40pct, today
    ) -> None:
        result = generate_proposal(engineer, senior_range, None, offer_40pct, "competitive", today)
        assert result["basePay"] == 2_500_000

    def test_full_proposal_for_engineer(self, engineer, senior_range, offer_50pct, today) -> None:
        """Compa 100 (+10), 4 years (+5), Engineering (+5), 50% offer (-10) on top of 85."""
        result = generate_proposal(engineer, senior_range, None, offer_50pct, Strategy.COMPETITIVE, today)
        assert result["basePay"] == 2_500_000
        assert result["variablePercentage"] == 12
        assert result["variablePay"] == 300_000
        assert result["ctc"] == 2_800_000
        assert result["riskLevel"] == "medium"
        assert result["confidence"] == 95
        assert result["compaRatio"] == pytest.approx(100.0)
        assert result["rangePosition"] == pytest.approx(50.0)
        assert result["marketPosition"] == "Market Competitive"
        assert result["rationale"] == (
            "Market-competitive 25.0% increase balancing retention risk with cost management. "
            "Employee is currently below market midpoint, adjustment needed to align with market standards. "
            "Recognizing 4 years of dedicated service and institutional knowledge."
        )

    def test_range_ceiling_limits_base(self, engineer, today) -> None:
        """A narrow band caps the raise at 110% of the band maximum."""
        tight = {"jobTitle": "X", "minSalary": 1_500_000, "midSalary": 1_800_000,
                 "maxSalary": 2_000_000, "variablePercentage": 10}
        offer = {"basePay": 2_800_000, "variablePay": 500_000, "ctc": 3_300_000}
        result = generate_proposal(engineer, tight, None, offer, "competitive", today)
        assert result["basePay"] == 2_200_000


class TestConservativeStrategy:
    def test_raise_capped_at_fifteen_percent_with_modest_variable(
        self, engineer, senior_range, offer_50pct, today
    ) -> None:
        result = generate_proposal(engineer, senior_range, None, offer_50pct, "conservative", today)
        assert result["basePay"] == 2_300_000
        assert result["variablePercentage"] == 11  # employee 10% + 1, under the range's 12%
        assert result["variablePay"] == 253_000
        assert result["ctc"] == 2_553_000
        assert result["riskLevel"] == "high"
        assert result["confidence"] == 75
        assert result["rationale"].startswith("Conservative 15.0% increase maintaining budget discipline")

    def test_small_offer_scales_raise_down(self, engineer, senior_range, today) -> None:
        """A 10% offer yields an 8% conservative raise."""
        offer = {"basePay": 2_200_000, "variablePay": 220_000, "ctc": 2_420_000}
        result = generate_proposal(engineer, senior_range, None, offer, "conservative", today)
        assert result["basePay"] == 2_160_000
        assert result["rationale"].startswith("Conservative 8.0% increase")


class TestAggressiveStrategy:
    """REQUIREMENT: Aggressive targets the promotion midpoint or beats the offer.

    WHAT: with a promotion range base = min(promo.mid, offer.base * 1.05) and the
          promotion variable %; otherwise min(range.max * 1.2, offer.base * 1.02)
          with range variable % + 2; risk low; base confidence 90
    """

    def test_promotion_range_scenario(self, engineer, senior_range, staff_range, offer_50pct, today) -> None:
        """Promotion mid 3.0M vs 2.8M * 1.05 = 2.94M: the offer side wins."""
        result = generate_proposal(engineer, senior_range, staff_range, offer_50pct, "aggressive", today)
        assert result["basePay"] == 2_940_000
        assert result["variablePercentage"] == 15
        assert result["variablePay"] == 441_000
        assert result["ctc"] == 3_381_000
        assert result["riskLevel"] == "low"
        assert result["marketPosition"] == "Above Market"
        assert result["confidence"] == 90  # +5 tenure, +5 Engineering, -10 pressure
        assert result["rationale"].startswith(
            "Aggressive retention strategy matching external market to secure critical talent. ")

    def test_without_promotion_range_beats_offer_by_two_percent(
        self, engineer, senior_range, offer_50pct, today
    ) -> None:
        result = generate_proposal(engineer, senior_range, None, offer_50pct, "aggressive", today)
        assert result["basePay"] == 2_856_000
        assert result["variablePercentage"] == 14
        assert result["variablePay"] == 399_840

    def test_confidence_is_clamped_to_100(self, engineer, senior_range, today) -> None:
        """90 base + 10 positioning + 5 tenure + 5 Engineering would be 110."""
        offer = {"basePay": 2_400_000, "variablePay": 240_000, "ctc": 2_640_000}
        result = generate_proposal(engineer, senior_range, None, offer, "aggressive", today)
        assert 90 <= result["compaRatio"] <= 110
        assert result["confidence"] == 100


class TestProposalInvariants:
    """REQUIREMENT: Every generated proposal is internally consistent."""

    @pytest.mark.parametrize("strategy", ["conservative", "competitive", "aggressive"])
    @pytest.mark.parametrize("offer_ctc", [2_300_000, 2_640_000, 3_300_000, 5_000_000])
    def test_ctc_compa_and_confidence(self, engineer, senior_range, staff_range, today,
                                      strategy: str, offer_ctc: int) -> None:
        offer = {"basePay": offer_ctc * 0.9, "variablePay": offer_ctc * 0.1, "ctc": offer_ctc}
        result = generate_proposal(engineer, senior_range, staff_range, offer, strategy, today)
        assert result["ctc"] == result["basePay"] + result["variablePay"]
        assert result["compaRatio"] == pytest.approx(result["basePay"] / senior_range["midSalary"] * 100)
        assert 0 <= result["confidence"] <= 100
        assert 0 <= result["rangePosition"] <= 100


class TestMissingInputs:
    """REQUIREMENT: Missing employee, range or offer yields no proposal, not an error."""

    def test_no_employee_returns_none(self, senior_range, offer_50pct, today) -> None:
        assert generate_proposal(None, senior_range, None, offer_50pct, "competitive", today) is None

    def test_no_current_range_returns_none(self, engineer, offer_50pct, today) -> None:
        assert generate_proposal(engineer, None, None, offer_50pct, "competitive", today) is None

    def test_zero_offer_ctc_returns_none(self, engineer, senior_range, today) -> None:
        offer = {"basePay": 0, "variablePay": 0, "ctc": 0}
        assert generate_proposal(engineer, senior_range, None, offer, "aggressive", today) is None

    def test_empty_proposal_placeholder(self) -> None:
        placeholder = empty_proposal()
        assert placeholder["ctc"] == 0
        assert placeholder["marketPosition"] == "Unknown"
        assert placeholder["confidence"] == 0
        assert placeholder["rationale"] == ""
        assert is_empty(placeholder)
        assert is_empty(None)

    def test_custom_strategy_is_not_generated(self, engineer, senior_range, offer_50pct) -> None:
        with pytest.raises(ValueError):
            generate_proposal(engineer, senior_range, None, offer_50pct, "custom")

    def test_unknown_strategy_is_rejected(self, engineer, senior_range, offer_50pct) -> None:
        with pytest.raises(ValueError):
            generate_proposal(engineer, senior_range, None, offer_50pct, "reckless")
