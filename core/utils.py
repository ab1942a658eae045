# core/utils.py

import re
from datetime import datetime, timezone

_ANGLE_BRACKETS = re.compile(r"[<>]")
_PASSWORD_RULES = (re.compile(r"[a-z]"), re.compile(r"[A-Z]"), re.compile(r"\d"))


def sanitize(data: dict) -> dict:
    """
    Sanitize a row payload before it is written to Supabase:
    - Empty strings → None
    - Preserve booleans, None values, lists and dicts
    - Strip string whitespace
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped if stripped else None
            continue

        clean[k] = v

    return clean


def sanitize_input(value: str) -> str:
    """Trim user-supplied text and drop angle brackets."""
    return _ANGLE_BRACKETS.sub("", value.strip())


def meets_password_policy(password: str) -> bool:
    """At least 8 characters with an uppercase, a lowercase and a digit."""
    return len(password) >= 8 and all(rule.search(password) for rule in _PASSWORD_RULES)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
