"""Runtime settings for the rewrite engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = "PDF_FACTORY_"


@dataclass(frozen=True)
class RewriterSettings:
    """Fixed strings written into every document the engine emits."""

    rewrite_creator: str = "PDF Factory Rewriter"
    security_creator: str = "PDF Factory Security Service"
    producer: str = "PDF Factory"
    default_owner_password: str = "default-owner-password"
    default_title: str = "Rewritten PDF Document"
    secured_title: str = "Secured PDF Document"
    secured_content: str = "This is a secured PDF document."

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "RewriterSettings":
        """Build settings from ``PDF_FACTORY_*`` environment variables."""

        env = os.environ if environ is None else environ
        defaults = cls()

        placeholder = env.get(f"{ENV_PREFIX}DEFAULT_OWNER_PASSWORD")
        if placeholder is not None and not placeholder:
            raise ValueError(
                f"{ENV_PREFIX}DEFAULT_OWNER_PASSWORD must not be empty when set; "
                "an encrypted document needs an owner password."
            )

        return cls(
            rewrite_creator=env.get(f"{ENV_PREFIX}CREATOR") or defaults.rewrite_creator,
            security_creator=env.get(f"{ENV_PREFIX}SECURITY_CREATOR") or defaults.security_creator,
            producer=env.get(f"{ENV_PREFIX}PRODUCER") or defaults.producer,
            default_owner_password=placeholder or defaults.default_owner_password,
            default_title=env.get(f"{ENV_PREFIX}DEFAULT_TITLE") or defaults.default_title,
        )


__all__ = ["ENV_PREFIX", "RewriterSettings"]
