"""Voucher (member booklet code) extraction from free-text names.

Codes look like ``V123`` or ``V-123``. They are found either in one of the
explicit code fields of a snapshot or as a trailing token of the display
name, e.g. ``"John Doe V-123"``, ``"John Doe (V-123)"``, ``"John Doe #V123"``.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Tuple, Union

EXPLICIT_FIELDS = ("voucher_no", "voucher", "member_id")

VOUCHER_TOKEN = re.compile(r"\bV-?\d{1,6}\b", re.IGNORECASE)
TRAILING_VOUCHER = re.compile(
    r"^(?P<name>.*?)[\s,\-]*(?<![A-Za-z0-9])[(\[#]?\s*(?P<code>V-?\s*\d{1,6})\s*[)\]]?\s*$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Matched:
    """A voucher code was found; ``name`` has it removed."""

    name: str
    code: str
    source: str

    def as_pair(self) -> Tuple[str, str]:
        return self.name, self.code


@dataclass(frozen=True)
class Unmatched:
    """No voucher code anywhere; the name is returned untouched."""

    original_name: str

    def as_pair(self) -> Tuple[str, str]:
        return self.original_name, ""


VoucherMatch = Union[Matched, Unmatched]
Matcher = Callable[[str, Mapping[str, Any]], Optional[Matched]]


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _strip_trailing_code(name: str, code: str) -> str:
    pattern = re.compile(r"[\s,\-#(\[]*" + re.escape(code) + r"[)\]]?\s*$", re.IGNORECASE)
    return pattern.sub("", name).strip()


def match_explicit_field(name: str, fields: Mapping[str, Any]) -> Optional[Matched]:
    """First explicit code field holding a voucher-shaped token wins."""
    for field in EXPLICIT_FIELDS:
        token = VOUCHER_TOKEN.search(_text(fields.get(field)))
        if token:
            code = token.group(0).upper()
            return Matched(name=_strip_trailing_code(name, code) or name, code=code, source=field)
    return None


def match_trailing_token(name: str, fields: Mapping[str, Any]) -> Optional[Matched]:
    """Voucher token at the end of the display name itself."""
    found = TRAILING_VOUCHER.match(name)
    if not found:
        return None
    code = re.sub(r"\s+", "", found.group("code")).upper()
    return Matched(name=found.group("name").strip() or name, code=code, source="name")


MATCHERS: Tuple[Matcher, ...] = (match_explicit_field, match_trailing_token)


def extract_voucher(display_name: Any, explicit_fields: Optional[Mapping[str, Any]] = None) -> VoucherMatch:
    """Split a display name into clean name and voucher code.

    Tries explicit fields, then the trailing token; never raises.
    """
    name = _text(display_name)
    fields = explicit_fields or {}
    for matcher in MATCHERS:
        result = matcher(name, fields)
        if result is not None:
            return result
    return Unmatched(original_name=name)
