from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 50

REPEATED_CHAR_PATTERN = re.compile(r"(.)\1{2,}")
# ASCII only; names with hyphens, apostrophes or accented letters are rejected.
NAME_CHARSET_PATTERN = re.compile(r"[a-zA-Z\s]+")


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None


VALID = ValidationResult(is_valid=True)


def _field(entry: Any, name: str, default: Any = None) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name, default)
    return getattr(entry, name, default)


def find_duplicate_names(names: Sequence[str]) -> list[str]:
    """Every occurrence of a name except its first one, in input order."""

    first_seen: dict[str, int] = {}
    duplicates: list[str] = []
    for index, name in enumerate(names):
        if first_seen.setdefault(name, index) != index:
            duplicates.append(name)
    return duplicates


def validate_usher_names(entries: Sequence[Any]) -> ValidationResult:
    """Check the names of one usher submission, returning the first violation.

    Duplicates are reported before any per-name rule. Each name must then be
    3 to 50 characters long, must not repeat a character three times in a row
    and may only hold ASCII letters and whitespace.
    """

    names = [_field(entry, "name") for entry in entries]

    if len(set(names)) < len(names):
        duplicates = find_duplicate_names(names)
        return ValidationResult(
            is_valid=False,
            error=f"Nama petugas tidak boleh duplikat: {', '.join(duplicates)}",
        )

    for name in names:
        if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
            return ValidationResult(
                is_valid=False,
                error=f"Panjang nama petugas minimum 3/maksimum 50 karakter: {name}",
            )

        if REPEATED_CHAR_PATTERN.search(name):
            return ValidationResult(
                is_valid=False,
                error=f"Mohon ketik nama petugas dengan benar: {name}",
            )

        if not NAME_CHARSET_PATTERN.fullmatch(name):
            return ValidationResult(
                is_valid=False,
                error=f"Nama petugas hanya boleh mengandung huruf: {name}",
            )

    return VALID


def validate_usher_roles(
    entries: Sequence[Any],
    require_ppg: bool,
    *,
    required_ppg: int = 2,
    required_kolekte: int = 3,
    min_total: int = 6,
) -> ValidationResult:
    ppg_count = sum(1 for entry in entries if _field(entry, "is_ppg", False))
    kolekte_count = sum(1 for entry in entries if _field(entry, "is_kolekte", False))
    total = len(entries)

    if require_ppg and ppg_count != required_ppg:
        return ValidationResult(
            is_valid=False,
            error=f"Jumlah PPG harus tepat {required_ppg} orang, saat ini: {ppg_count} orang",
        )

    if kolekte_count != required_kolekte:
        return ValidationResult(
            is_valid=False,
            error=f"Jumlah Kolekte harus tepat {required_kolekte} orang, saat ini: {kolekte_count} orang",
        )

    if total < min_total:
        return ValidationResult(
            is_valid=False,
            error=f"Jumlah petugas minimal {min_total} orang, saat ini: {total} orang",
        )

    return VALID
