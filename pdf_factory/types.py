"""
Type definitions and dataclasses for PDF Factory.

This module defines the data structures shared by the permission model, the
encryption policy and the rewrite engine.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Dict, Optional

from .permissions import NO_RESTRICTION_MASK, PermissionSet, is_affirmative


class EncryptionLevel(IntEnum):
    """Key length of a standard security handler, in bits."""

    BITS_40 = 40
    BITS_128 = 128
    BITS_256 = 256


class EncryptionAlgorithm(Enum):
    """Cipher family recorded for a document."""

    NONE = "None"
    RC4 = "RC4"
    AES = "AES"


class CipherMode(Enum):
    """Cipher modes the codec can write, as ``(codec algorithm, key bits)``."""

    RC4_40 = ("RC4-40", 40)
    RC4_128 = ("RC4-128", 128)
    AES_128 = ("AES-128", 128)

    @property
    def codec_name(self) -> str:
        return self.value[0]

    @property
    def key_bits(self) -> int:
        return self.value[1]


class SecurityDisposition(Enum):
    """What a rewrite does with the source document's protection."""

    PRESERVE = "preserve"
    REMOVE = "remove"


class RewriteStage(Enum):
    """Stages of a single rewrite, in the order they are reached."""

    STARTED = "started"
    OPENED = "opened"
    PROFILE_EXTRACTED = "profile-extracted"
    OUTPUT_CREATED = "output-created"
    SECURITY_APPLIED = "security-applied"
    PAGES_COPIED = "pages-copied"
    FINALIZED = "finalized"


def algorithm_label(level: Optional[EncryptionLevel], algorithm: EncryptionAlgorithm) -> str:
    if algorithm is EncryptionAlgorithm.NONE:
        return "None"
    if level is None:
        return "Unknown"
    return f"{int(level)}-bit {algorithm.value}"


@dataclass(frozen=True)
class SecurityProfile:
    """
    Normalised snapshot of a document's protection state.

    Attributes:
        encrypted: Whether the document carries an encryption dictionary
        encryption_level: Key length in bits, ``None`` when unencrypted
        algorithm: Cipher family
        permissions: Capabilities granted to a user of the document
        permission_mask: Raw ``/P`` value, ``-1`` when unencrypted
        owner_password_present: Whether an owner password protects the document
        user_password_present: Whether a password is needed to open the document
        pdf_version: Header version, e.g. ``"1.7"``
        creator: ``/Creator`` entry of the document information dictionary
        producer: ``/Producer`` entry of the document information dictionary
    """

    encrypted: bool = False
    encryption_level: Optional[EncryptionLevel] = None
    algorithm: EncryptionAlgorithm = EncryptionAlgorithm.NONE
    permissions: PermissionSet = field(default_factory=PermissionSet.all_granted)
    permission_mask: int = NO_RESTRICTION_MASK
    owner_password_present: bool = False
    user_password_present: bool = False
    pdf_version: str = ""
    creator: str = "Unknown"
    producer: str = "Unknown"

    def __post_init__(self) -> None:
        if not self.encrypted:
            # An unencrypted document enforces nothing.
            object.__setattr__(self, "encryption_level", None)
            object.__setattr__(self, "algorithm", EncryptionAlgorithm.NONE)
            object.__setattr__(self, "permissions", PermissionSet.all_granted())
            object.__setattr__(self, "permission_mask", NO_RESTRICTION_MASK)

    @property
    def algorithm_name(self) -> str:
        return algorithm_label(self.encryption_level, self.algorithm)

    def as_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "encrypted": self.encrypted,
            "encryption_level": int(self.encryption_level) if self.encryption_level else None,
            "encryption_algorithm": self.algorithm_name,
            "permissions": self.permission_mask,
        }
        data.update(self.permissions.as_dict())
        data.update(
            {
                "pdf_version": self.pdf_version,
                "creator": self.creator,
                "producer": self.producer,
                "has_owner_password": self.owner_password_present,
                "has_user_password": self.user_password_present,
            }
        )
        return data


@dataclass
class RewriteSpec:
    """
    Request to rewrite an existing PDF.

    Attributes:
        input_path: Source PDF
        output_path: Destination file; bytes are returned when omitted
        owner_password: Owner password of the source
        user_password: User password of the source
        new_owner_password: Owner password for the output, defaults to ``owner_password``
        new_user_password: User password for the output, defaults to ``user_password``
        preserve_security: Re-encrypt the output like the source
        remove_security: Emit an unencrypted output; wins over ``preserve_security``
    """

    input_path: str | Path
    output_path: Optional[str | Path] = None
    owner_password: Optional[str] = None
    user_password: Optional[str] = None
    new_owner_password: Optional[str] = None
    new_user_password: Optional[str] = None
    preserve_security: bool = True
    remove_security: bool = False

    @property
    def security_disposition(self) -> SecurityDisposition:
        if self.remove_security or not self.preserve_security:
            return SecurityDisposition.REMOVE
        return SecurityDisposition.PRESERVE

    @property
    def source_password(self) -> Optional[str]:
        return self.owner_password if self.owner_password is not None else self.user_password

    @property
    def output_owner_password(self) -> Optional[str]:
        return self.new_owner_password if self.new_owner_password is not None else self.owner_password

    @property
    def output_user_password(self) -> Optional[str]:
        return self.new_user_password if self.new_user_password is not None else self.user_password


@dataclass
class SecuritySettings:
    """Security built from scratch for a new or unprotected document."""

    permissions: PermissionSet = field(default_factory=PermissionSet.none_granted)
    owner_password: Optional[str] = None
    user_password: Optional[str] = None
    encryption_type: Optional[str] = "RC4_128"

    @classmethod
    def from_flags(
        cls,
        *,
        allow_printing: Any = "N",
        allow_high_quality_printing: Any = "N",
        allow_assembly: Any = "N",
        allow_copy: Any = "N",
        allow_screen_readers: Any = "N",
        allow_modify_contents: Any = "N",
        allow_modify_annotations: Any = "N",
        allow_fill_in: Any = "N",
        owner_password: Optional[str] = None,
        user_password: Optional[str] = None,
        encryption_type: Optional[str] = "RC4_128",
    ) -> "SecuritySettings":
        permissions = PermissionSet(
            allow_printing=is_affirmative(allow_printing),
            allow_high_quality_printing=is_affirmative(allow_high_quality_printing),
            allow_modify_contents=is_affirmative(allow_modify_contents),
            allow_copy=is_affirmative(allow_copy),
            allow_modify_annotations=is_affirmative(allow_modify_annotations),
            allow_fill_in=is_affirmative(allow_fill_in),
            allow_screen_readers=is_affirmative(allow_screen_readers),
            allow_assembly=is_affirmative(allow_assembly),
        )
        return cls(
            permissions=permissions,
            owner_password=owner_password,
            user_password=user_password,
            encryption_type=encryption_type,
        )


@dataclass
class RewriteOutcome:
    """
    Result of a rewrite or secure operation.

    Attributes:
        success: Whether the operation completed
        message: Human readable summary
        pdf_bytes: Output document when no destination path was given
        output_path: Destination path when one was given
        original_security_info: Profile of the source document
        new_security_info: Profile of the output, when it could be read back
        error_type: Name of the error kind on failure
    """

    success: bool
    message: str
    pdf_bytes: Optional[bytes] = None
    output_path: Optional[str] = None
    original_security_info: Optional[SecurityProfile] = None
    new_security_info: Optional[SecurityProfile] = None
    error_type: Optional[str] = None

    @property
    def file_size(self) -> Optional[int]:
        if self.pdf_bytes is not None:
            return len(self.pdf_bytes)
        if self.output_path is not None and Path(self.output_path).exists():
            return Path(self.output_path).stat().st_size
        return None

    @property
    def pdf_base64(self) -> Optional[str]:
        if self.pdf_bytes is None:
            return None
        return base64.b64encode(self.pdf_bytes).decode("ascii")

    def __str__(self) -> str:
        if self.success:
            return f"RewriteOutcome(success=True, size={self.file_size})"
        return f"RewriteOutcome(success=False, error='{self.message}')"


__all__ = [
    "CipherMode",
    "EncryptionAlgorithm",
    "EncryptionLevel",
    "PermissionSet",
    "RewriteOutcome",
    "RewriteSpec",
    "RewriteStage",
    "SecurityDisposition",
    "SecurityProfile",
    "SecuritySettings",
    "algorithm_label",
]
