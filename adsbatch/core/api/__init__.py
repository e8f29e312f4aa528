"""HTTP configuration and retry policy."""
from .config import (
    AdsConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig,
    DEFAULT_API_VERSION
)
from .retry import RetryStrategy, ExponentialBackoffStrategy

__all__ = [
    'AdsConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'DEFAULT_API_VERSION',
    'RetryStrategy',
    'ExponentialBackoffStrategy',
]
