import re
from typing import Any

_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_email(candidate: Any) -> bool:
    """Syntactic check only: local@domain.tld, no whitespace, a single '@'."""
    return _EMAIL_RE.fullmatch(str(candidate)) is not None
