from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from kflow.domain.common.money import Money


def test_from_decimal_rounds_half_up_to_cents() -> None:
    assert Money.from_decimal("2.345").amount_cents == 235
    assert Money.from_decimal(Decimal("10")).to_decimal() == Decimal("10.00")


def test_adding_different_currencies_fails() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="USD") + Money(amount_cents=100, currency="EUR")


def test_negative_amounts_are_rejected() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=-1, currency="USD")
