"""
Batch job module.

Serializes operations, uploads them through the resumable upload protocol
and parses downloaded results.
"""
from .utilities import BatchJobUtilities, FEATURE_ID
from .serialization import BatchJobXmlSerializer
from .transfer import (
    ResumableTransfer,
    CHUNK_SIZE_ALIGNMENT,
    DEFAULT_CHUNK_SIZE,
    validate_chunk_size
)
from .models import (
    Operation,
    BatchJobMutateRequest,
    ApiError,
    MutateResult,
    BatchJobMutateResponse,
    BatchJobMutateResponseEnvelope
)
from .protocols import (
    BatchJobSerializerProtocol,
    TransferProtocol,
    UsageRecorderProtocol
)

__all__ = [
    # Main classes
    'BatchJobUtilities',
    'BatchJobXmlSerializer',
    'ResumableTransfer',
    'FEATURE_ID',
    'CHUNK_SIZE_ALIGNMENT',
    'DEFAULT_CHUNK_SIZE',
    'validate_chunk_size',
    
    # Models
    'Operation',
    'BatchJobMutateRequest',
    'ApiError',
    'MutateResult',
    'BatchJobMutateResponse',
    'BatchJobMutateResponseEnvelope',
    
    # Protocols
    'BatchJobSerializerProtocol',
    'TransferProtocol',
    'UsageRecorderProtocol',
]
