"""
OnDie Signature Validator

Validates attestation signatures produced by OnDie hardware identity devices:
converts the fixed-width raw ECDSA signature into DER, verifies it with the
leaf certificate's P-384 key and enforces fail-closed CRL revocation checks
over the signer's certificate chain.
"""

__version__ = "0.1.0"

from .config import ValidatorConfig
from .errors import (
    OnDieError,
    SignatureFormatError,
    SignatureEncodingError,
    SignatureVerificationError,
    RevocationError,
    CertificateRevokedError,
    CrlUnavailableError,
    MalformedCrlError,
    MalformedCertificateError,
)
from .revocation import (
    OnDieCache,
    InMemoryOnDieCache,
    RedisOnDieCache,
    RevocationChecker,
)
from .validator import (
    FailureKind,
    ValidationResult,
    OnDieSignatureValidator,
    load_certificate_chain,
    snapshot_metrics,
)

__all__ = [
    "ValidatorConfig",
    "OnDieError",
    "SignatureFormatError",
    "SignatureEncodingError",
    "SignatureVerificationError",
    "RevocationError",
    "CertificateRevokedError",
    "CrlUnavailableError",
    "MalformedCrlError",
    "MalformedCertificateError",
    "OnDieCache",
    "InMemoryOnDieCache",
    "RedisOnDieCache",
    "RevocationChecker",
    "FailureKind",
    "ValidationResult",
    "OnDieSignatureValidator",
    "load_certificate_chain",
    "snapshot_metrics",
]
