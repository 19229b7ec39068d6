"""Resolution of requested or inherited encryption strength to a writable cipher."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from .observers import LoggingObserver, SecurityObserver
from .types import CipherMode, EncryptionAlgorithm, EncryptionLevel, SecurityProfile

# AES-256 is not written by this engine; both paths fall back to AES-128.
UNSUPPORTED_TIER_FALLBACK = CipherMode.AES_128
DEFAULT_REQUEST_MODE = CipherMode.RC4_128
DEFAULT_PROFILE_MODE = CipherMode.AES_128


class EncryptionLabel(Enum):
    """Encryption types accepted from callers."""

    RC4_40 = "RC4_40"
    RC4_128 = "RC4_128"
    AES_128 = "AES_128"
    AES_256 = "AES_256"

    @classmethod
    def parse(cls, value: Any) -> Optional["EncryptionLabel"]:
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


class StrengthTier(Enum):
    """Strength of a source document, classified from its level and algorithm label."""

    UNRECORDED = "unrecorded"
    TIER_256 = "256"
    TIER_128 = "128"
    TIER_40 = "40"
    OTHER = "other"


def classify(level: Optional[EncryptionLevel | int], algorithm_name: str = "") -> StrengthTier:
    """Classify a recorded key length and free-text algorithm name.

    The algorithm name is only consulted when the level alone does not
    decide the tier, and 256 is checked before 128.
    """

    if level is None:
        return StrengthTier.UNRECORDED
    level = int(level)
    name = algorithm_name or ""
    if level == 256 or "256" in name:
        return StrengthTier.TIER_256
    if level == 128 or "128" in name:
        return StrengthTier.TIER_128
    if level == 40:
        return StrengthTier.TIER_40
    return StrengthTier.OTHER


class EncryptionPolicy:
    """Maps encryption requests onto :class:`CipherMode` values.

    Both entry points are total: every input yields a mode. Requests for an
    unsupported tier are downgraded and reported through the observer.
    """

    def __init__(self, observer: SecurityObserver | None = None) -> None:
        self.observer: SecurityObserver = observer or LoggingObserver()

    def resolve(self, requested: Any) -> CipherMode:
        label = EncryptionLabel.parse(requested)
        if label is EncryptionLabel.RC4_40:
            return CipherMode.RC4_40
        if label is EncryptionLabel.RC4_128:
            return CipherMode.RC4_128
        if label is EncryptionLabel.AES_128:
            return CipherMode.AES_128
        if label is EncryptionLabel.AES_256:
            self.observer.downgrade_applied(label.value, UNSUPPORTED_TIER_FALLBACK)
            return UNSUPPORTED_TIER_FALLBACK
        return DEFAULT_REQUEST_MODE

    def resolve_from_profile(self, profile: SecurityProfile) -> CipherMode:
        tier = classify(profile.encryption_level, profile.algorithm_name)
        if tier is StrengthTier.UNRECORDED:
            return DEFAULT_PROFILE_MODE
        if tier is StrengthTier.TIER_256:
            self.observer.downgrade_applied(profile.algorithm_name, UNSUPPORTED_TIER_FALLBACK)
            return UNSUPPORTED_TIER_FALLBACK
        if tier is StrengthTier.TIER_128:
            if profile.algorithm is EncryptionAlgorithm.AES:
                return CipherMode.AES_128
            return CipherMode.RC4_128
        if tier is StrengthTier.TIER_40:
            return CipherMode.RC4_40
        return DEFAULT_PROFILE_MODE


def resolve_cipher(requested: Any, *, observer: SecurityObserver | None = None) -> CipherMode:
    """Convenience wrapper around :meth:`EncryptionPolicy.resolve`."""

    return EncryptionPolicy(observer).resolve(requested)


def resolve_cipher_from_profile(
    profile: SecurityProfile, *, observer: SecurityObserver | None = None
) -> CipherMode:
    """Convenience wrapper around :meth:`EncryptionPolicy.resolve_from_profile`."""

    return EncryptionPolicy(observer).resolve_from_profile(profile)


__all__ = [
    "EncryptionLabel",
    "EncryptionPolicy",
    "StrengthTier",
    "classify",
    "resolve_cipher",
    "resolve_cipher_from_profile",
]
