"""
Fail-closed CRL revocation checking over a certificate chain.

Policy:
  - A certificate without a CRL Distribution Points extension carries no
    revocation requirement and passes.
  - A distribution point whose CRL is not in the cache fails the whole
    check, as does a CRL that lists the certificate's serial number.

The first two outcomes are deliberately asymmetric: a missing extension means
nothing has to be proven, a missing CRL means non-revocation cannot be proven.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from cryptography import x509

from ..errors import (
    CertificateRevokedError,
    CrlUnavailableError,
    MalformedCertificateError,
    MalformedCrlError,
    RevocationError,
)
from .cache import OnDieCache

logger = logging.getLogger(__name__)


def general_name_key(name: x509.GeneralName) -> str:
    """Cache key for a distribution-point general name."""
    if isinstance(name, x509.UniformResourceIdentifier):
        return name.value
    if isinstance(name, x509.DirectoryName):
        return name.value.rfc4514_string()
    return str(name.value)


def distribution_point_names(cert: x509.Certificate) -> List[str]:
    """Return the cache keys of every CRL distribution point of ``cert``.

    An empty list means the certificate has no CRL Distribution Points extension.
    """
    try:
        ext = cert.extensions.get_extension_for_class(x509.CRLDistributionPoints)
    except x509.ExtensionNotFound:
        return []
    except ValueError as e:
        raise MalformedCertificateError(
            f"cannot decode CRL Distribution Points: {e}",
            serial_number=cert.serial_number,
        ) from e

    names: List[str] = []
    for dp in ext.value:
        if not dp.full_name:
            # relative names need the CRL issuer to resolve
            raise CrlUnavailableError(
                "distribution point has no full name",
                serial_number=cert.serial_number,
            )
        names.extend(general_name_key(n) for n in dp.full_name)
    return names


def load_crl(data: bytes, name: str = "") -> x509.CertificateRevocationList:
    """Parse CRL bytes, DER first, then PEM."""
    try:
        return x509.load_der_x509_crl(data)
    except ValueError:
        pass
    try:
        return x509.load_pem_x509_crl(data)
    except ValueError as e:
        raise MalformedCrlError(f"unable to parse CRL ({name})", distribution_point=name) from e


class RevocationChecker:
    """Checks every certificate of a chain against the CRLs held in an OnDieCache."""

    def __init__(self, cache: OnDieCache):
        self.cache = cache

    def check(self, chain: Sequence[x509.Certificate]) -> None:
        """Raise a RevocationError subclass on the first failing certificate."""
        for cert in chain:
            self.check_certificate(cert)

    def check_certificate(self, cert: x509.Certificate) -> None:
        serial = cert.serial_number
        for name in distribution_point_names(cert):
            crl_bytes = self.cache.lookup(name)
            if crl_bytes is None:
                logger.error(
                    "CRL (%s) not found in cache for cert: %s",
                    name, cert.issuer.rfc4514_string(),
                )
                raise CrlUnavailableError(
                    f"CRL ({name}) not found in cache",
                    serial_number=serial,
                    distribution_point=name,
                )
            crl = load_crl(crl_bytes, name)
            if crl.get_revoked_certificate_by_serial_number(serial) is not None:
                logger.warning("Certificate %x revoked per CRL %s", serial, name)
                raise CertificateRevokedError(
                    f"certificate {serial:x} is revoked",
                    serial_number=serial,
                    distribution_point=name,
                )

    def is_clear(self, chain: Sequence[x509.Certificate]) -> bool:
        """True when no certificate is revoked and every required CRL resolved.

        Errors raised by the cache collaborator also yield False.
        """
        try:
            self.check(chain)
        except RevocationError:
            return False
        except Exception:
            logger.exception("Revocation check failed unexpectedly")
            return False
        return True


__all__ = [
    "RevocationChecker",
    "distribution_point_names",
    "general_name_key",
    "load_crl",
]
