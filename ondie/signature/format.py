"""
Raw OnDie signature layout and its conversion to ASN.1 DER.

An OnDie signature blob is laid out as::

    [ task-info (36) | R (48) | S (48) | ... ]

R and S are fixed-width big-endian P-384 components. The signed data is the
task-info followed by the caller's payload.
"""

from dataclasses import dataclass

from ..errors import SignatureEncodingError, SignatureFormatError

TASK_INFO_LENGTH = 36
R_LENGTH = 48
S_LENGTH = 48
MIN_SIGNATURE_LENGTH = TASK_INFO_LENGTH + R_LENGTH + S_LENGTH

DER_SEQUENCE = 0x30
DER_INTEGER = 0x02

# Lengths are written as single bytes (DER short form).
_MAX_SHORT_LENGTH = 0x7F
assert 4 + (R_LENGTH + 1) + (S_LENGTH + 1) <= _MAX_SHORT_LENGTH


@dataclass(frozen=True)
class SignatureParts:
    """The three fields of a raw OnDie signature."""
    task_info: bytes
    r: bytes
    s: bytes


def decode_signature(signature: bytes) -> SignatureParts:
    """Split a raw signature into task-info, R and S.

    Bytes past the S field are ignored.
    """
    if len(signature) < MIN_SIGNATURE_LENGTH:
        raise SignatureFormatError(
            f"signature too short: {len(signature)} < {MIN_SIGNATURE_LENGTH}"
        )
    r_start = TASK_INFO_LENGTH
    s_start = r_start + R_LENGTH
    return SignatureParts(
        task_info=bytes(signature[:r_start]),
        r=bytes(signature[r_start:s_start]),
        s=bytes(signature[s_start:s_start + S_LENGTH]),
    )


def _der_integer(value: bytes) -> bytes:
    # Minimal two's-complement: drop redundant zeros, then pad if the top bit is set.
    content = value.lstrip(b"\x00") or b"\x00"
    if content[0] & 0x80:
        content = b"\x00" + content
    return bytes([DER_INTEGER, len(content)]) + content


def encode_der_signature(parts: SignatureParts) -> bytes:
    """Encode R and S as ``SEQUENCE { INTEGER r, INTEGER s }``."""
    if len(parts.task_info) != TASK_INFO_LENGTH:
        raise SignatureEncodingError(f"taskinfo length is incorrect: {len(parts.task_info)}")
    if len(parts.r) != R_LENGTH or len(parts.s) != S_LENGTH:
        raise SignatureEncodingError(
            f"r/s length is incorrect: {len(parts.r)}/{len(parts.s)}"
        )

    r_int = _der_integer(parts.r)
    s_int = _der_integer(parts.s)
    # 4 covers the tag and length bytes of both INTEGERs
    body_length = 4 + (len(r_int) - 2) + (len(s_int) - 2)
    return bytes([DER_SEQUENCE, body_length]) + r_int + s_int


def adjust_payload(task_info: bytes, payload: bytes) -> bytes:
    """Rebuild the signed byte stream: task-info followed by the payload."""
    return bytes(task_info) + bytes(payload)


__all__ = [
    "TASK_INFO_LENGTH",
    "R_LENGTH",
    "S_LENGTH",
    "MIN_SIGNATURE_LENGTH",
    "DER_SEQUENCE",
    "DER_INTEGER",
    "SignatureParts",
    "decode_signature",
    "encode_der_signature",
    "adjust_payload",
]
