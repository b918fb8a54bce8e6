import pytest

from app.lib.validation import is_valid_email


@pytest.mark.parametrize(
    "email",
    ["jane@example.com", "a@b.co", "first.last+tag@sub.domain.org", "x@y.z"],
)
def test_valid_emails(email):
    assert is_valid_email(email) is True


@pytest.mark.parametrize(
    "email",
    [
        "abc",
        "a@b",
        "@b.com",
        "a@.com",
        "a@b.",
        "a@@b.com",
        "a@b@c.com",
        "jane @example.com",
        "jane@example.com\n",
        "",
    ],
)
def test_invalid_emails(email):
    assert is_valid_email(email) is False


def test_non_string_input_never_raises():
    assert is_valid_email(None) is False
    assert is_valid_email(42) is False
