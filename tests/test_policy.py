from __future__ import annotations

import pytest

from pdf_factory.observers import RecordingObserver
from pdf_factory.policy import (
    EncryptionLabel,
    EncryptionPolicy,
    StrengthTier,
    classify,
    resolve_cipher,
    resolve_cipher_from_profile,
)
from pdf_factory.types import CipherMode, EncryptionAlgorithm, EncryptionLevel, SecurityProfile


def _profile(level: EncryptionLevel, algorithm: EncryptionAlgorithm) -> SecurityProfile:
    return SecurityProfile(encrypted=True, encryption_level=level, algorithm=algorithm, permission_mask=-3904)


@pytest.mark.parametrize(
    ("requested", "expected"),
    [
        ("RC4_40", CipherMode.RC4_40),
        ("RC4_128", CipherMode.RC4_128),
        ("AES_128", CipherMode.AES_128),
        ("aes_128", CipherMode.AES_128),
        (None, CipherMode.RC4_128),
        ("", CipherMode.RC4_128),
        ("BLOWFISH", CipherMode.RC4_128),
    ],
)
def test_resolve(requested, expected) -> None:
    assert EncryptionPolicy(RecordingObserver()).resolve(requested) is expected


def test_resolve_aes_256_downgrades_with_signal() -> None:
    observer = RecordingObserver()
    policy = EncryptionPolicy(observer)

    assert policy.resolve("AES_256") is policy.resolve("AES_128")
    assert observer.events == [("downgrade_applied", ("AES_256", CipherMode.AES_128))]


def test_resolve_from_profile_keeps_rc4_128() -> None:
    profile = _profile(EncryptionLevel.BITS_128, EncryptionAlgorithm.RC4)

    assert profile.algorithm_name == "128-bit RC4"
    assert resolve_cipher_from_profile(profile, observer=RecordingObserver()) is CipherMode.RC4_128


@pytest.mark.parametrize(
    ("level", "algorithm", "expected"),
    [
        (EncryptionLevel.BITS_128, EncryptionAlgorithm.AES, CipherMode.AES_128),
        (EncryptionLevel.BITS_40, EncryptionAlgorithm.RC4, CipherMode.RC4_40),
    ],
)
def test_resolve_from_profile(level, algorithm, expected) -> None:
    observer = RecordingObserver()

    assert EncryptionPolicy(observer).resolve_from_profile(_profile(level, algorithm)) is expected
    assert observer.events == []


def test_resolve_from_profile_downgrades_256() -> None:
    observer = RecordingObserver()
    profile = _profile(EncryptionLevel.BITS_256, EncryptionAlgorithm.AES)

    assert EncryptionPolicy(observer).resolve_from_profile(profile) is CipherMode.AES_128
    assert observer.names() == ["downgrade_applied"]


def test_resolve_from_profile_without_level_uses_aes_128() -> None:
    profile = SecurityProfile(encrypted=True, encryption_level=None, algorithm=EncryptionAlgorithm.RC4)

    assert resolve_cipher_from_profile(profile, observer=RecordingObserver()) is CipherMode.AES_128


@pytest.mark.parametrize(
    ("level", "name", "tier"),
    [
        (None, "", StrengthTier.UNRECORDED),
        (256, "", StrengthTier.TIER_256),
        (128, "256-bit AES", StrengthTier.TIER_256),
        (128, "", StrengthTier.TIER_128),
        (64, "128-bit RC4", StrengthTier.TIER_128),
        (40, "40-bit RC4", StrengthTier.TIER_40),
        (56, "56-bit RC4", StrengthTier.OTHER),
    ],
)
def test_classify(level, name, tier) -> None:
    assert classify(level, name) is tier


def test_encryption_label_parse() -> None:
    assert EncryptionLabel.parse(" rc4_40 ") is EncryptionLabel.RC4_40
    assert EncryptionLabel.parse(EncryptionLabel.AES_256) is EncryptionLabel.AES_256
    assert EncryptionLabel.parse("AES-128") is None
    assert EncryptionLabel.parse(None) is None


def test_resolve_cipher_wrapper() -> None:
    assert resolve_cipher("RC4_40", observer=RecordingObserver()) is CipherMode.RC4_40
