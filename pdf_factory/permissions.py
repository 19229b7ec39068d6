"""Translation between permission records and the PDF ``/P`` bitmask.

The bit positions are those of the standard security handler (PDF 32000-1,
table 22) and are exposed by :class:`pypdf.constants.UserAccessPermissions`.
Bits 1-2 must be clear and bits 7-8 and 13-32 must be set in every mask this
module produces.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from pypdf.constants import UserAccessPermissions

# Field name -> permission bit.
CAPABILITY_BITS: dict[str, int] = {
    "allow_printing": int(UserAccessPermissions.PRINT),
    "allow_modify_contents": int(UserAccessPermissions.MODIFY),
    "allow_copy": int(UserAccessPermissions.EXTRACT),
    "allow_modify_annotations": int(UserAccessPermissions.ADD_OR_MODIFY),
    "allow_fill_in": int(UserAccessPermissions.FILL_FORM_FIELDS),
    "allow_screen_readers": int(UserAccessPermissions.EXTRACT_TEXT_AND_GRAPHICS),
    "allow_assembly": int(UserAccessPermissions.ASSEMBLE_DOC),
    "allow_high_quality_printing": int(UserAccessPermissions.PRINT_TO_REPRESENTATION),
}

RESERVED_BITS = 0xFFFFF0C0
NO_RESTRICTION_MASK = -1

AFFIRMATIVE_TOKENS = frozenset({"Y", "TRUE", "1"})


@dataclass(frozen=True)
class PermissionSet:
    """Eight independent capabilities granted to a user of the document."""

    allow_printing: bool = False
    allow_high_quality_printing: bool = False
    allow_modify_contents: bool = False
    allow_copy: bool = False
    allow_modify_annotations: bool = False
    allow_fill_in: bool = False
    allow_screen_readers: bool = False
    allow_assembly: bool = False

    @classmethod
    def all_granted(cls) -> "PermissionSet":
        return cls(**{name: True for name in CAPABILITY_BITS})

    @classmethod
    def none_granted(cls) -> "PermissionSet":
        return cls()

    def granted(self) -> list[str]:
        """Return the names of the granted capabilities in declaration order."""

        return [item.name for item in fields(self) if getattr(self, item.name)]

    def as_dict(self) -> dict[str, bool]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


def to_signed32(value: int) -> int:
    """Reinterpret the low 32 bits of ``value`` as a signed integer."""

    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def encode(permissions: PermissionSet) -> int:
    """Return the signed 32-bit ``/P`` value granting ``permissions``."""

    mask = RESERVED_BITS
    for name, bit in CAPABILITY_BITS.items():
        if getattr(permissions, name):
            mask |= bit
    return to_signed32(mask)


def decode(mask: int, was_encrypted: bool) -> PermissionSet:
    """Return the capabilities granted by ``mask``.

    An unencrypted document carries no enforceable restriction, so every
    capability is granted regardless of ``mask``.
    """

    if not was_encrypted:
        return PermissionSet.all_granted()
    return PermissionSet(**{name: bool(mask & bit) for name, bit in CAPABILITY_BITS.items()})


def is_affirmative(token: Any) -> bool:
    """Interpret a loosely typed ``"Y"``/``"TRUE"``/``"1"`` flag.

    Anything else, including ``None`` and the empty string, is a refusal.
    """

    if token is None:
        return False
    if isinstance(token, bool):
        return token
    try:
        normalized = str(token).strip().upper()
    except Exception:  # pragma: no cover - exotic __str__ implementations
        return False
    return normalized in AFFIRMATIVE_TOKENS


__all__ = [
    "AFFIRMATIVE_TOKENS",
    "CAPABILITY_BITS",
    "NO_RESTRICTION_MASK",
    "PermissionSet",
    "RESERVED_BITS",
    "decode",
    "encode",
    "is_affirmative",
    "to_signed32",
]
