"""
One-way masking transforms for sensitive field values.

Every transform returns None for empty input, coerces non-string input with
``str()`` and never raises.
"""

import re
from typing import Any, Callable, Optional

_NON_DIGITS = re.compile(r"\D")


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return text or None


def mask_phone(value: Any) -> Optional[str]:
    """
    Mask a phone number, keeping a short prefix and suffix of its digits.

    Example:
        >>> mask_phone("01712345678")
        '017*****678'
        >>> mask_phone("+8801712345678")
        '+88017*****678'
    """
    text = _as_text(value)
    if text is None:
        return None
    digits = _NON_DIGITS.sub("", text)
    if len(digits) < 4:
        return "***-****"
    if len(digits) <= 6:
        return digits[:2] + "***" + digits[-2:]
    if digits.startswith("880"):
        return "+880" + digits[3:5] + "*****" + digits[-3:]
    return digits[:3] + "*****" + digits[-3:]


def mask_email(value: Any) -> Optional[str]:
    """
    Mask the local part of an email address.

    Example:
        >>> mask_email("rahim@example.com")
        'ra***@example.com'
    """
    text = _as_text(value)
    if text is None:
        return None
    parts = text.split("@")
    local = parts[0]
    domain = parts[1] if len(parts) > 1 else ""
    if not local or not domain:
        return "***@***.***"
    return local[: min(2, len(local))] + "***@" + domain


def mask_identifier(value: Any) -> Optional[str]:
    """
    Mask a national ID, passport or tax number.

    Example:
        >>> mask_identifier("1234567890123")
        '12****0123'
    """
    text = _as_text(value)
    if text is None:
        return None
    if len(text) < 4:
        return "****-****-****"
    if len(text) >= 10:
        return text[:2] + "****" + text[-4:]
    return "****" + text[-4:]


def mask_string(value: Any, show_chars: int = 2) -> Optional[str]:
    """Generic redaction keeping ``show_chars`` leading characters."""
    text = _as_text(value)
    if text is None:
        return None
    if len(text) <= show_chars:
        return "*" * len(text)
    tail = text[-1] if len(text) > show_chars + 2 else ""
    return text[:show_chars] + "***" + tail


def mask_bank_account(value: Any) -> Optional[str]:
    return mask_string(value, show_chars=3)


MASKERS: dict[str, Callable[[Any], Optional[str]]] = {
    "personal_mobile": mask_phone,
    "official_mobile": mask_phone,
    "personal_email": mask_email,
    "official_email": mask_email,
    "nid_number": mask_identifier,
    "passport_number": mask_identifier,
    "tin_number": mask_identifier,
    "bank_account_number": mask_bank_account,
}


def get_masker(field_name: str) -> Optional[Callable[[Any], Optional[str]]]:
    return MASKERS.get(field_name)


def mask_field(field_name: str, value: Any) -> Optional[str]:
    """
    Mask ``value`` with the transform registered for ``field_name``.

    Fields without a dedicated transform fall back to ``mask_string``.
    """
    masker = MASKERS.get(field_name, mask_string)
    return masker(value)
