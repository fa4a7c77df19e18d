"""
Package signature converts raw OnDie signatures into DER and verifies them.
"""

from .format import (
    TASK_INFO_LENGTH,
    R_LENGTH,
    S_LENGTH,
    MIN_SIGNATURE_LENGTH,
    SignatureParts,
    decode_signature,
    encode_der_signature,
    adjust_payload,
)

from .verify import (
    verify_signature,
    is_valid_signature,
)

__all__ = [
    'TASK_INFO_LENGTH',
    'R_LENGTH',
    'S_LENGTH',
    'MIN_SIGNATURE_LENGTH',
    'SignatureParts',
    'decode_signature',
    'encode_der_signature',
    'adjust_payload',
    'verify_signature',
    'is_valid_signature',
]
