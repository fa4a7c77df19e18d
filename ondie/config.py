"""Validator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

CHECK_REVOCATIONS_ENV = "ONDIE_CHECK_REVOCATIONS"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class ValidatorConfig:
    """Configuration for OnDieSignatureValidator."""
    # Enforce CRL checks on every certificate in the chain
    check_revocations: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ValidatorConfig":
        """Build a config from environment variables, keeping defaults for unset ones."""
        env = os.environ if environ is None else environ
        raw = env.get(CHECK_REVOCATIONS_ENV)
        if raw is None or raw.strip() == "":
            return cls()
        return cls(check_revocations=_parse_bool(CHECK_REVOCATIONS_ENV, raw))


__all__ = ["ValidatorConfig", "CHECK_REVOCATIONS_ENV"]
