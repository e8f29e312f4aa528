"""Batch job models."""
from .batch_models import (
    Operation,
    BatchJobMutateRequest,
    ApiError,
    MutateResult,
    BatchJobMutateResponse,
    BatchJobMutateResponseEnvelope,
    OPERATORS,
    TYPE_KEY
)

__all__ = [
    'Operation',
    'BatchJobMutateRequest',
    'ApiError',
    'MutateResult',
    'BatchJobMutateResponse',
    'BatchJobMutateResponseEnvelope',
    'OPERATORS',
    'TYPE_KEY'
]
