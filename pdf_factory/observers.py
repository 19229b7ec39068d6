"""Observers notified by the engine at fixed points of an operation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Tuple

from .types import CipherMode, RewriteStage, SecurityProfile
from .utils import get_logger


class SecurityObserver(Protocol):
    """Receives engine events. Implementations must not raise."""

    def profile_extracted(self, source: str, profile: SecurityProfile) -> None:
        ...

    def downgrade_applied(self, requested: str, applied: CipherMode) -> None:
        ...

    def stage_reached(self, operation: str, stage: RewriteStage) -> None:
        ...

    def operation_finalized(self, operation: str, size: Optional[int]) -> None:
        ...

    def operation_failed(self, operation: str, stage: RewriteStage, error: BaseException) -> None:
        ...

    def owner_password_substituted(self, operation: str) -> None:
        ...

    def verification_skipped(self, target: str, error: BaseException) -> None:
        ...

    def cleanup_failed(self, target: str, error: BaseException) -> None:
        ...


class LoggingObserver:
    """Default observer writing every event to a logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_logger("pdf_factory.engine")

    def profile_extracted(self, source: str, profile: SecurityProfile) -> None:
        self.logger.info(
            "Read security profile of %s (encrypted=%s, algorithm=%s, permissions=%s)",
            source,
            profile.encrypted,
            profile.algorithm_name,
            bin(profile.permission_mask & 0xFFFFFFFF),
        )

    def downgrade_applied(self, requested: str, applied: CipherMode) -> None:
        self.logger.warning(
            "%s encryption is not supported, downgrading to %s (%d-bit key)",
            requested,
            applied.codec_name,
            applied.key_bits,
        )

    def stage_reached(self, operation: str, stage: RewriteStage) -> None:
        self.logger.debug("%s: %s", operation, stage.value)

    def operation_finalized(self, operation: str, size: Optional[int]) -> None:
        self.logger.info("%s finished (%s bytes)", operation, size if size is not None else "?")

    def operation_failed(self, operation: str, stage: RewriteStage, error: BaseException) -> None:
        self.logger.error("%s failed after stage '%s': %s", operation, stage.value, error)

    def owner_password_substituted(self, operation: str) -> None:
        self.logger.warning("%s: no owner password supplied, using the configured placeholder", operation)

    def verification_skipped(self, target: str, error: BaseException) -> None:
        self.logger.warning("Unable to read back %s for verification: %s", target, error)

    def cleanup_failed(self, target: str, error: BaseException) -> None:
        self.logger.warning("Unable to remove temporary file %s: %s", target, error)


@dataclass
class RecordingObserver:
    """Observer that keeps every event in memory, mostly for tests."""

    events: List[Tuple[str, Tuple[Any, ...]]] = field(default_factory=list)

    def _record(self, name: str, *args: Any) -> None:
        self.events.append((name, args))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def profile_extracted(self, source: str, profile: SecurityProfile) -> None:
        self._record("profile_extracted", source, profile)

    def downgrade_applied(self, requested: str, applied: CipherMode) -> None:
        self._record("downgrade_applied", requested, applied)

    def stage_reached(self, operation: str, stage: RewriteStage) -> None:
        self._record("stage_reached", operation, stage)

    def operation_finalized(self, operation: str, size: Optional[int]) -> None:
        self._record("operation_finalized", operation, size)

    def operation_failed(self, operation: str, stage: RewriteStage, error: BaseException) -> None:
        self._record("operation_failed", operation, stage, error)

    def owner_password_substituted(self, operation: str) -> None:
        self._record("owner_password_substituted", operation)

    def verification_skipped(self, target: str, error: BaseException) -> None:
        self._record("verification_skipped", target, error)

    def cleanup_failed(self, target: str, error: BaseException) -> None:
        self._record("cleanup_failed", target, error)


__all__ = ["LoggingObserver", "RecordingObserver", "SecurityObserver"]
