"""
Protocol definitions for the batch job module.

The facade depends on these interfaces only, so each collaborator
(transport, serializer, usage tracker) can be swapped in tests.
"""
from typing import Protocol

from .models import (
    BatchJobMutateRequest,
    BatchJobMutateResponseEnvelope
)


class UsageRecorderProtocol(Protocol):
    """Protocol for feature usage telemetry sinks."""

    def mark_usage(self, feature_id: str) -> None:
        """Record one use of a feature."""
        ...

    def text(self) -> str:
        """Render recorded usage for the User-Agent header."""
        ...


class BatchJobSerializerProtocol(Protocol):
    """Protocol for request/response (de)serializers."""

    def serialize_request(self, request: BatchJobMutateRequest) -> str:
        """
        Serialize a request to its wire text.

        Args:
            request: Request holding ordered operations

        Returns:
            Document text
        """
        ...

    def parse_envelope(self, text: str) -> BatchJobMutateResponseEnvelope:
        """
        Parse downloaded result text.

        Args:
            text: Raw result document

        Returns:
            Response envelope
        """
        ...


class TransferProtocol(Protocol):
    """Protocol for resumable upload and result download."""

    async def get_resumable_upload_url(self, url: str) -> str:
        """Exchange an upload URL for a resumable session URI."""
        ...

    async def upload(
        self,
        url: str,
        data: bytes,
        resume_previous_upload: bool = False
    ) -> None:
        """
        Upload bytes to a URL.

        Args:
            url: Resumable session URI
            data: Complete body to store
            resume_previous_upload: Continue an interrupted upload
        """
        ...

    async def download_results(self, url: str) -> str:
        """Download result text from a URL."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
