"""Tests for StrEnum types in the challenge domain.

Covers:
- All members have correct lowercase values
- Serialization in JSON via a Pydantic model
- Invalid values rejected
"""

from enum import StrEnum

import pytest
from pydantic import BaseModel, ValidationError

from Tradle.models.enums import BotStrategy, DataOrigin, RejectionReason, Verdict


class _EnumTestModel(BaseModel):
    """Helper model for testing enum JSON serialization."""

    origin: DataOrigin
    verdict: Verdict
    strategy: BotStrategy


class TestValues:
    def test_data_origin(self) -> None:
        assert DataOrigin.HISTORICAL == "historical"
        assert DataOrigin.SYNTHETIC == "synthetic"

    def test_verdict(self) -> None:
        assert [v.value for v in Verdict] == ["better", "worse", "no_trades"]

    def test_bot_strategy(self) -> None:
        assert {s.value for s in BotStrategy} == {
            "buy_and_hold",
            "momentum",
            "dca",
            "mean_reversion",
            "random",
        }

    def test_rejection_reasons(self) -> None:
        assert RejectionReason("data_failure") is RejectionReason.DATA_FAILURE
        assert len(RejectionReason) == 4

    @pytest.mark.parametrize("enum_cls", [DataOrigin, Verdict, BotStrategy, RejectionReason])
    def test_all_are_lowercase_str_enums(self, enum_cls: type[StrEnum]) -> None:
        assert issubclass(enum_cls, StrEnum)
        assert all(member.value == member.value.lower() for member in enum_cls)


class TestSerialization:
    def test_json_round_trip(self) -> None:
        model = _EnumTestModel(
            origin=DataOrigin.SYNTHETIC, verdict=Verdict.NO_TRADES, strategy=BotStrategy.DCA
        )
        dumped = model.model_dump_json()
        assert '"synthetic"' in dumped
        assert '"no_trades"' in dumped
        assert _EnumTestModel.model_validate_json(dumped) == model

    def test_invalid_value_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _EnumTestModel.model_validate(
                {"origin": "made_up", "verdict": "better", "strategy": "dca"}
            )
