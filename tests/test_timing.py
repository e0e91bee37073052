import math

import pytest

from psyscript.timing import Timing, TimingKind, parse_number


def test_sentinels_are_classified():
    assert Timing.parse("n") == Timing.none()
    assert Timing.parse("inf").kind is TimingKind.INFINITE


def test_numbers_keep_integer_type_when_integral():
    assert isinstance(Timing.parse("1500").value, int)
    assert Timing.parse("1.5").value == pytest.approx(1.5)


@pytest.mark.parametrize("token", ["", "N", "Inf", "infinity", "nan", "1e999", "10ms"])
def test_other_tokens_are_rejected(token):
    with pytest.raises(ValueError):
        Timing.parse(token)


def test_unit_conversions():
    assert Timing.of(1500).to("s") == pytest.approx(1.5)
    assert Timing.of(20).to("ms") == pytest.approx(20.0)
    assert Timing.infinite().to("s") == math.inf
    assert Timing.none().to("s") is None


def test_unsupported_unit_rejected():
    with pytest.raises(ValueError):
        Timing.of(1).to("min")


def test_parse_number_accepts_signs():
    assert parse_number("-20") == -20
    assert parse_number("+3.25") == pytest.approx(3.25)


@pytest.mark.parametrize("token", ["1_000", "1_0.5", "١٢", "½", "0x10", ".", "1e"])
def test_parse_number_accepts_plain_ascii_decimals_only(token):
    with pytest.raises(ValueError):
        parse_number(token)


def test_parse_number_accepts_exponents_and_bare_fractions():
    assert parse_number("1.5e3") == pytest.approx(1500.0)
    assert parse_number(".5") == pytest.approx(0.5)
    assert parse_number("2.") == pytest.approx(2.0)
