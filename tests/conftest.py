"""Shared fixtures: P-384 keys, certificates with CRL distribution points, CRLs."""

import datetime
from typing import Iterable, List, Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature
from cryptography.x509.oid import ExtensionOID, NameOID

from ondie.signature import R_LENGTH, S_LENGTH, TASK_INFO_LENGTH

CRL_URL = "http://crl.ondie.example.com/ondie-ca.crl"
LEAF_SERIAL = 0x1001
CA_SERIAL = 0x01

TASK_INFO = bytes(range(TASK_INFO_LENGTH))
PAYLOAD = b"device onboarding nonce and message body"


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def make_cert(
    subject: str,
    public_key,
    issuer: str,
    issuer_key,
    serial: int,
    distribution_points: Optional[List[x509.DistributionPoint]] = None,
) -> x509.Certificate:
    now = datetime.datetime.now(datetime.timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(_name(subject))
        .issuer_name(_name(issuer))
        .public_key(public_key)
        .serial_number(serial)
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
    )
    if distribution_points:
        builder = builder.add_extension(x509.CRLDistributionPoints(distribution_points), critical=False)
    return builder.sign(issuer_key, hashes.SHA384())


def uri_point(url: str) -> x509.DistributionPoint:
    return x509.DistributionPoint(
        full_name=[x509.UniformResourceIdentifier(url)],
        relative_name=None,
        reasons=None,
        crl_issuer=None,
    )


def make_crl(issuer: str, issuer_key, revoked: Iterable[int] = (),
             encoding=serialization.Encoding.DER) -> bytes:
    now = datetime.datetime.now(datetime.timezone.utc)
    builder = (
        x509.CertificateRevocationListBuilder()
        .issuer_name(_name(issuer))
        .last_update(now - datetime.timedelta(hours=1))
        .next_update(now + datetime.timedelta(days=1))
    )
    for serial in revoked:
        builder = builder.add_revoked_certificate(
            x509.RevokedCertificateBuilder()
            .serial_number(serial)
            .revocation_date(now - datetime.timedelta(minutes=5))
            .build()
        )
    return builder.sign(issuer_key, hashes.SHA384()).public_bytes(encoding)


def sign_ondie(private_key, task_info: bytes, payload: bytes) -> bytes:
    """Produce a raw OnDie signature: task-info | R | S."""
    der = private_key.sign(task_info + payload, ec.ECDSA(hashes.SHA384()))
    r, s = decode_dss_signature(der)
    return task_info + r.to_bytes(R_LENGTH, "big") + s.to_bytes(S_LENGTH, "big")


@pytest.fixture(scope="session")
def ca_key():
    return ec.generate_private_key(ec.SECP384R1())


@pytest.fixture(scope="session")
def leaf_key():
    return ec.generate_private_key(ec.SECP384R1())


@pytest.fixture(scope="session")
def ca_cert(ca_key):
    return make_cert("OnDie Root CA", ca_key.public_key(), "OnDie Root CA", ca_key, CA_SERIAL)


@pytest.fixture(scope="session")
def leaf_cert(leaf_key, ca_key):
    return make_cert(
        "OnDie Device", leaf_key.public_key(), "OnDie Root CA", ca_key, LEAF_SERIAL,
        distribution_points=[uri_point(CRL_URL)],
    )


@pytest.fixture(scope="session")
def chain(leaf_cert, ca_cert):
    return [leaf_cert, ca_cert]


@pytest.fixture(scope="session")
def clean_crl(ca_key):
    return make_crl("OnDie Root CA", ca_key, revoked=[0x7777])


@pytest.fixture(scope="session")
def revoking_crl(ca_key):
    return make_crl("OnDie Root CA", ca_key, revoked=[0x7777, LEAF_SERIAL])


@pytest.fixture
def signature(leaf_key):
    return sign_ondie(leaf_key, TASK_INFO, PAYLOAD)


def make_cert_with_bad_crl_dp(subject_key, issuer_key, serial: int) -> x509.Certificate:
    """Certificate whose CRL Distribution Points extension value is not valid DER."""
    now = datetime.datetime.now(datetime.timezone.utc)
    garbage = x509.UnrecognizedExtension(ExtensionOID.CRL_DISTRIBUTION_POINTS, b"\x04\x02ab")
    return (
        x509.CertificateBuilder()
        .subject_name(_name("OnDie Device"))
        .issuer_name(_name("OnDie Root CA"))
        .public_key(subject_key.public_key())
        .serial_number(serial)
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(garbage, critical=False)
        .sign(issuer_key, hashes.SHA384())
    )
