import pytest

from order_ledger.validators import is_positive_number, is_valid_email


@pytest.mark.parametrize(
    "email", ["example@gmail.com", "user.name@domain.co.uk", "user.name@sub.domain.co.uk"]
)
def test_valid_emails(email):
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    [
        "invalid_email",
        "@gmail.com",
        "example..com",
        "a@b@c.com",
        "user@domain",
        " user.name@domain.co.uk ",
        "user name@domain.com",
        "",
        None,
        42,
    ],
)
def test_invalid_emails(email):
    assert not is_valid_email(email)


def test_positive_numbers():
    assert is_positive_number(42)
    assert is_positive_number(0.5)
    # Zero is considered positive
    assert is_positive_number(0)


def test_negative_numbers():
    assert not is_positive_number(-42)
    assert not is_positive_number(-0.01)


@pytest.mark.parametrize("value", ["abc", "10", True, None, [], float("nan")])
def test_non_numbers(value):
    assert not is_positive_number(value)


@pytest.mark.parametrize("value", [float("inf"), float("-inf")])
def test_non_finite_numbers(value):
    assert not is_positive_number(value)
