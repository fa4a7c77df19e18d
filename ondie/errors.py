"""
Exception hierarchy for OnDie signature validation.

These are raised by the decoding, verification and revocation layers. The
validator converts them into a ValidationResult; nothing here escapes
``OnDieSignatureValidator.validate``.
"""

from typing import Optional


class OnDieError(Exception):
    """Base class for all OnDie validation errors."""


class SignatureFormatError(OnDieError):
    """Raw signature is shorter than task-info + R + S."""


class SignatureEncodingError(OnDieError):
    """DER conversion precondition violated."""


class SignatureVerificationError(OnDieError):
    """Leaf key or algorithm cannot be used for ECDSA verification."""


class RevocationError(OnDieError):
    """Base class for revocation failures."""

    def __init__(self, message: str, serial_number: Optional[int] = None,
                 distribution_point: Optional[str] = None):
        super().__init__(message)
        self.serial_number = serial_number
        self.distribution_point = distribution_point


class CertificateRevokedError(RevocationError):
    """Certificate serial number is listed on a CRL."""


class CrlUnavailableError(RevocationError):
    """A required CRL could not be resolved from the cache."""


class MalformedCrlError(RevocationError):
    """CRL bytes could not be parsed as DER or PEM."""


class MalformedCertificateError(RevocationError):
    """A certificate's CRL Distribution Points extension could not be decoded."""


__all__ = [
    "OnDieError",
    "SignatureFormatError",
    "SignatureEncodingError",
    "SignatureVerificationError",
    "RevocationError",
    "CertificateRevokedError",
    "CrlUnavailableError",
    "MalformedCrlError",
    "MalformedCertificateError",
]
