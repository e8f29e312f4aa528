"""
adsbatch - Async helpers for advertising API batch jobs.

Usage:
    >>> from adsbatch import AdsUser, BatchJobUtilities, Operation
    >>> 
    >>> async with AdsUser() as user:
    ...     utilities = BatchJobUtilities(user)
    ...     url = await utilities.get_resumable_upload_url(upload_url)
    ...     await utilities.upload(url, [Operation('ADD', {'name': 'x'})])
    ...     response = await utilities.download(download_url)
"""
import logging
from .user import AdsUser

# Configuration
from .core.api import (
    AdsConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig
)

# Batch jobs
from .core.batch import (
    BatchJobUtilities,
    BatchJobXmlSerializer,
    ResumableTransfer,
    Operation,
    BatchJobMutateRequest,
    BatchJobMutateResponse,
    BatchJobMutateResponseEnvelope,
    MutateResult,
    ApiError
)
from .core.usage import FeatureUsageRegistry
from .core.exceptions import (
    BatchJobException,
    BatchJobTransferError,
    BatchJobSerializationError
)

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for adsbatch modules.
    
    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'adsbatch',
        'adsbatch.user',
        'adsbatch.batch',
        'adsbatch.batch.transfer',
        'adsbatch.batch.serialization',
    ]
    
    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'AdsUser',
    'BatchJobUtilities',
    'BatchJobXmlSerializer',
    'ResumableTransfer',
    'Operation',
    'BatchJobMutateRequest',
    'BatchJobMutateResponse',
    'BatchJobMutateResponseEnvelope',
    'MutateResult',
    'ApiError',
    'FeatureUsageRegistry',
    'BatchJobException',
    'BatchJobTransferError',
    'BatchJobSerializationError',
    'AdsConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'setup_logging',
]
