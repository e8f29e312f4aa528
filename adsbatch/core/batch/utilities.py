"""
Batch job utilities.

Provides a simplified interface for uploading batch job operations and
downloading their results.
Follows Facade Pattern - hides serialization and transfer details.
"""
from typing import Optional, Sequence

from ...user import AdsUser
from ..logging import get_logger
from .models import Operation, BatchJobMutateRequest, BatchJobMutateResponse
from .protocols import (
    BatchJobSerializerProtocol,
    TransferProtocol,
    UsageRecorderProtocol
)
from .serialization import BatchJobXmlSerializer
from .transfer import ResumableTransfer, DEFAULT_CHUNK_SIZE, validate_chunk_size

FEATURE_ID = 'BatchJobUtilities'

logger = get_logger('adsbatch.batch')


class BatchJobUtilities:
    """
    Upload operations for a batch job and download the results.

    Use chunking if the network is spotty for uploads, or if it has
    restrictions such as speed limits or timeouts. Chunking makes uploads
    reliable over an unreliable network but costs one HTTPS request per
    chunk on a good connection.

    Example:
        >>> async with AdsUser() as user:
        ...     utilities = BatchJobUtilities(user, use_chunking=True)
        ...     url = await utilities.get_resumable_upload_url(job_upload_url)
        ...     await utilities.upload(url, operations)
        ...     response = await utilities.download(job_download_url)
    """

    def __init__(
        self,
        user: AdsUser,
        use_chunking: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        usage_registry: Optional[UsageRecorderProtocol] = None,
        serializer: Optional[BatchJobSerializerProtocol] = None,
        transfer: Optional[TransferProtocol] = None
    ):
        """
        Initialize batch job utilities.

        Args:
            user: Session context the utilities are bound to
            use_chunking: Break the upload into chunk_size pieces
            chunk_size: Chunk size for resumable upload, a multiple of 256 KB
            usage_registry: Telemetry sink (defaults to the user's registry)
            serializer: Request/response serializer
            transfer: Upload/download transport

        Raises:
            ValueError: If chunk_size is not a positive multiple of 256 KB
        """
        validate_chunk_size(chunk_size)
        self._user = user
        self._use_chunking = use_chunking
        self._chunk_size = chunk_size
        self._usage_registry = usage_registry if usage_registry is not None else user.usage_registry
        self._serializer = serializer or BatchJobXmlSerializer(user.config.api_version)
        self._transfer = transfer

    @property
    def use_chunking(self) -> bool:
        return self._use_chunking

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def __aenter__(self) -> 'BatchJobUtilities':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _get_transfer(self) -> TransferProtocol:
        if self._transfer is None:
            session = await self._user.get_session()
            self._transfer = ResumableTransfer(
                config=self._user.config,
                use_chunking=self._use_chunking,
                chunk_size=self._chunk_size,
                session=session,
                usage_registry=self._usage_registry
            )
        return self._transfer

    async def close(self):
        """Release the transfer; the user's shared session stays open."""
        if self._transfer is not None:
            await self._transfer.close()
            self._transfer = None

    def get_post_body(self, operations: Sequence[Operation]) -> str:
        """
        Gets the upload body for a list of operations.

        Args:
            operations: The list of operations

        Returns:
            XML text of the mutate request
        """
        request = BatchJobMutateRequest(operations)
        return self._serializer.serialize_request(request)

    async def get_resumable_upload_url(self, url: str) -> str:
        """
        Exchange the batch job's upload URL for a resumable session URI.

        Args:
            url: The upload URL returned by the batch job service

        Returns:
            URL to pass to upload()
        """
        transfer = await self._get_transfer()
        return await transfer.get_resumable_upload_url(url)

    async def upload(
        self,
        url: str,
        operations: Sequence[Operation],
        resume_previous_upload: bool = False
    ) -> None:
        """
        Uploads the operations to a specified URL.

        Args:
            url: The temporary URL returned by a batch job
            operations: The list of operations
            resume_previous_upload: True if a previously interrupted upload
                should be resumed
        """
        self._usage_registry.mark_usage(FEATURE_ID)

        post_body = self.get_post_body(operations).encode('utf-8')
        logger.info(
            f"Uploading {len(operations)} operations ({len(post_body)} bytes, "
            f"chunking={'on' if self._use_chunking else 'off'}, resume={resume_previous_upload})"
        )
        transfer = await self._get_transfer()
        await transfer.upload(url, post_body, resume_previous_upload)

    async def download(self, url: str) -> BatchJobMutateResponse:
        """
        Downloads the batch job results from a specified URL.

        Args:
            url: The download URL from a batch job

        Returns:
            The results from the batch job
        """
        contents = await self.download_text(url)
        response = self.parse_response(contents)
        logger.info(f"Downloaded {len(response)} results ({len(response.failed)} failed)")
        return response

    async def download_text(self, url: str) -> str:
        """Downloads the raw result document without parsing it."""
        transfer = await self._get_transfer()
        return await transfer.download_results(url)

    def parse_response(self, contents: str) -> BatchJobMutateResponse:
        """
        Parses the response from cloud storage servers.

        Args:
            contents: The response body

        Returns:
            The mutate response nested in the parsed envelope
        """
        return self._serializer.parse_envelope(contents).mutate_response
