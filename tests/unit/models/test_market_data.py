"""Tests for RawPricePoint, CondensedPoint, and SymbolInfo."""

import datetime

import pytest
from pydantic import ValidationError

from Tradle.models import CondensedPoint, RawPricePoint, SymbolInfo


class TestRawPricePoint:
    def test_valid_row(self) -> None:
        row = RawPricePoint(
            date=datetime.date(2015, 3, 2), open=1.0, high=2.0, low=0.5, close=1.5, volume=10
        )
        assert row.close == 1.5

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RawPricePoint(
                date=datetime.date(2015, 3, 2), open=1.0, high=2.0, low=-0.5, close=1.5, volume=10
            )

    def test_frozen(self) -> None:
        row = RawPricePoint(
            date=datetime.date(2015, 3, 2), open=1.0, high=1.0, low=1.0, close=1.0, volume=0
        )
        with pytest.raises(ValidationError):
            row.close = 2.0  # type: ignore[misc]

    def test_date_parsed_from_iso(self) -> None:
        row = RawPricePoint.model_validate(
            {"date": "2015-03-02", "open": 1, "high": 1, "low": 1, "close": 1, "volume": 1}
        )
        assert row.date == datetime.date(2015, 3, 2)


class TestCondensedPoint:
    def test_volume_optional(self) -> None:
        assert CondensedPoint(timestamp=0, price=10.0).volume is None

    def test_negative_timestamp_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CondensedPoint(timestamp=-1, price=10.0)

    @pytest.mark.parametrize("price", [0.0, -1.0])
    def test_price_must_be_positive(self, price: float) -> None:
        with pytest.raises(ValidationError):
            CondensedPoint(timestamp=0, price=price)


class TestSymbolInfo:
    def test_optional_links(self) -> None:
        info = SymbolInfo(ticker="SPY", name="SPDR S&P 500 ETF")
        assert info.sector is None
        assert info.wiki_link is None
        assert info.info_link is None
