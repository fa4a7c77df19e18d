"""
OnDie attestation signature validation.

The validator runs two gates in order:

1. Revocation: every certificate of the chain is checked against the CRLs
   held in the injected cache (skipped when ``check_revocations`` is off).
2. Signature: the raw OnDie signature is split into task-info, R and S, R/S
   are re-encoded as DER, and SHA384withECDSA is verified over
   ``task-info || signed data`` with the leaf certificate's key.

Either gate can reject. ``evaluate`` reports why; ``validate`` only says
whether. Neither raises.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm

from .config import ValidatorConfig
from .errors import (
    CertificateRevokedError,
    CrlUnavailableError,
    MalformedCertificateError,
    MalformedCrlError,
    SignatureEncodingError,
    SignatureFormatError,
    SignatureVerificationError,
)
from .monitoring.metrics_exporter import ACCEPTED, get_registry
from .revocation.cache import OnDieCache
from .revocation.checker import RevocationChecker
from .signature.format import adjust_payload, decode_signature, encode_der_signature
from .signature.verify import verify_signature

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    """Why a signature was rejected."""
    TOO_SHORT = "too_short"                    # raw signature under 132 bytes
    REVOKED = "revoked"                        # a chain certificate is on a CRL
    CRL_UNAVAILABLE = "crl_unavailable"        # a required CRL is not cached
    SIGNATURE_MISMATCH = "signature_mismatch"  # ECDSA verification failed
    INTERNAL_ERROR = "internal_error"          # parsing/crypto failure or defect


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation. Truthy only when the signature is accepted."""
    valid: bool
    failure: Optional[FailureKind] = None
    detail: str = ""

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, kind: FailureKind, detail: str = "") -> "ValidationResult":
        return cls(valid=False, failure=kind, detail=detail)


# Metrics counters (thread-safe)
_metrics_lock = threading.Lock()
_metric_validations = 0
_metric_accepted = 0
_metric_rejected: Dict[FailureKind, int] = {kind: 0 for kind in FailureKind}


def _record(result: ValidationResult) -> None:
    global _metric_validations, _metric_accepted
    with _metrics_lock:
        _metric_validations += 1
        if result.valid:
            _metric_accepted += 1
        else:
            _metric_rejected[result.failure] += 1
    try:
        get_registry().observe_outcome(ACCEPTED if result.valid else result.failure.value)
    except Exception:
        # the outcome stands; only the export is lost
        logger.exception("Failed to export OnDie validation metrics")


def snapshot_metrics() -> Dict[str, int]:
    """Return current validation metric counters."""
    with _metrics_lock:
        snapshot = {
            "validations_total": _metric_validations,
            "validations_accepted_total": _metric_accepted,
        }
        for kind, count in _metric_rejected.items():
            snapshot[f"validations_rejected_{kind.value}_total"] = count
        return snapshot


def load_certificate_chain(data: bytes) -> List[x509.Certificate]:
    """Parse a PEM bundle (leaf first) or a single DER certificate."""
    if b"-----BEGIN" in data:
        return x509.load_pem_x509_certificates(data)
    return [x509.load_der_x509_certificate(data)]


class OnDieSignatureValidator:
    """Validates OnDie signatures against a certificate chain.

    Holds no per-call state, so one instance may serve concurrent callers as
    long as the cache tolerates concurrent reads.
    """

    def __init__(self, cache: OnDieCache, config: Optional[ValidatorConfig] = None):
        self.config = config or ValidatorConfig()
        self.revocation_checker = RevocationChecker(cache)
        logger.debug("OnDie validator initialized (check_revocations=%s)",
                     self.config.check_revocations)

    def validate(self, chain: Sequence[x509.Certificate], signed_data: bytes,
                 signature: bytes) -> bool:
        """Return True only if the chain is unrevoked and the signature verifies."""
        return self.evaluate(chain, signed_data, signature).valid

    def evaluate(self, chain: Sequence[x509.Certificate], signed_data: bytes,
                 signature: bytes) -> ValidationResult:
        """Validate and report the failure kind on rejection."""
        try:
            result = self._evaluate(chain, signed_data, signature)
        except Exception as e:
            logger.exception("Unexpected error during OnDie signature validation")
            result = ValidationResult.fail(FailureKind.INTERNAL_ERROR, f"unexpected error: {e}")

        _record(result)
        if not result.valid:
            logger.info("OnDie signature rejected: %s %s", result.failure.value, result.detail)
        return result

    def _evaluate(self, chain: Sequence[x509.Certificate], signed_data: bytes,
                  signature: bytes) -> ValidationResult:
        # Check revocations first.
        if self.config.check_revocations:
            try:
                self.revocation_checker.check(chain)
            except CertificateRevokedError as e:
                return ValidationResult.fail(FailureKind.REVOKED, str(e))
            except CrlUnavailableError as e:
                return ValidationResult.fail(FailureKind.CRL_UNAVAILABLE, str(e))
            except (MalformedCrlError, MalformedCertificateError) as e:
                return ValidationResult.fail(FailureKind.INTERNAL_ERROR, str(e))

        try:
            parts = decode_signature(signature)
        except SignatureFormatError as e:
            return ValidationResult.fail(FailureKind.TOO_SHORT, str(e))

        if not chain:
            return ValidationResult.fail(FailureKind.INTERNAL_ERROR, "empty certificate chain")

        signed = adjust_payload(parts.task_info, signed_data)
        try:
            der_signature = encode_der_signature(parts)
            verify_signature(der_signature, signed, _leaf_public_key(chain))
        except InvalidSignature:
            return ValidationResult.fail(FailureKind.SIGNATURE_MISMATCH, "signature does not match")
        except (SignatureEncodingError, SignatureVerificationError) as e:
            return ValidationResult.fail(FailureKind.INTERNAL_ERROR, str(e))

        return ValidationResult.ok()


def _leaf_public_key(chain: Sequence[x509.Certificate]):
    try:
        return chain[0].public_key()
    except (ValueError, UnsupportedAlgorithm) as e:
        raise SignatureVerificationError(f"cannot load leaf public key: {e}") from e


__all__ = [
    "FailureKind",
    "ValidationResult",
    "OnDieSignatureValidator",
    "load_certificate_chain",
    "snapshot_metrics",
]
