import math

import pytest

from order_ledger.normalizers import normalize_email, normalize_float


def test_normalize_email_without_whitespace():
    assert normalize_email("testemail@example.com") == "testemail@example.com"


def test_normalize_email_mixed_case_and_whitespace():
    assert normalize_email(" TestEmail@Example.com ") == "testemail@example.com"
    assert normalize_email(" A@B.COM ") == "a@b.com"


def test_normalize_email_is_idempotent():
    once = normalize_email("  Mixed.Case@Domain.ORG\t")
    assert normalize_email(once) == once


@pytest.mark.parametrize(
    "raw, expected",
    [
        (100, 100.0),
        ("100", 100.0),
        ("19.999", 20.0),
        (" 42.5 ", 42.5),
        (0.016, 0.02),
        (-3.211, -3.21),
    ],
)
def test_normalize_float_rounds_to_two_places(raw, expected):
    assert normalize_float(raw) == expected


@pytest.mark.parametrize("raw", [1.005, 123.456, "7.891", 0, -12.3456, 1e6 + 0.129])
def test_normalize_float_is_idempotent(raw):
    once = normalize_float(raw)
    assert normalize_float(once) == once


@pytest.mark.parametrize("raw", ["abc", "", None, True, "12..5"])
def test_normalize_float_unparsable_is_nan(raw):
    assert math.isnan(normalize_float(raw))


@pytest.mark.parametrize(
    "raw, expected",
    [(0.125, 0.13), (10.125, 10.13), ("2.675", 2.67), (1.005, 1.0), (-0.125, -0.13)],
)
def test_normalize_float_rounds_halves_up(raw, expected):
    assert normalize_float(raw) == expected


@pytest.mark.parametrize("raw", ["1e309", "inf", "-inf", float("inf"), 10**400])
def test_normalize_float_non_finite_is_nan(raw):
    assert math.isnan(normalize_float(raw))
