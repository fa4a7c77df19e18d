"""
Package revocation resolves CRL distribution points through an injected cache
and enforces a fail-closed revocation policy over a certificate chain.
"""

from .cache import (
    OnDieCache,
    InMemoryOnDieCache,
    RedisOnDieCache,
)

from .checker import (
    RevocationChecker,
    distribution_point_names,
    general_name_key,
    load_crl,
)

__all__ = [
    'OnDieCache',
    'InMemoryOnDieCache',
    'RedisOnDieCache',
    'RevocationChecker',
    'distribution_point_names',
    'general_name_key',
    'load_crl',
]
