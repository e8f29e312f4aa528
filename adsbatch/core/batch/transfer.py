"""
Resumable transfer service.

Speaks the cloud storage resumable upload protocol used by batch job
upload URLs:

1. POST to the upload URL with ``x-goog-resumable: start`` to obtain a
   session URI (``Location`` header).
2. PUT the body to the session URI with ``Content-Range`` headers, either in
   one request or in chunks aligned to 256 KB.
3. To resume, PUT an empty body with ``Content-Range: bytes */<total>``;
   the server answers 308 with a ``Range`` header naming the stored bytes.
"""
import asyncio
import re
import time
from typing import Dict, Optional

import aiohttp

from ..api.config import AdsConfig
from ..api.retry import RetryStrategy, ExponentialBackoffStrategy
from ..exceptions import BatchJobTransferError
from ..logging import get_logger
from .protocols import UsageRecorderProtocol

CHUNK_SIZE_ALIGNMENT = 256 * 1024
DEFAULT_CHUNK_SIZE = 40 * CHUNK_SIZE_ALIGNMENT  # 10 MB

HTTP_RESUME_INCOMPLETE = 308

_RANGE_PATTERN = re.compile(r'bytes=(\d+)-(\d+)')

logger = get_logger('adsbatch.batch.transfer')


def validate_chunk_size(chunk_size: int) -> None:
    """
    Check a chunk size against the resumable upload protocol.

    Raises:
        ValueError: If chunk_size is not a positive multiple of 256 KB
    """
    if chunk_size <= 0 or chunk_size % CHUNK_SIZE_ALIGNMENT != 0:
        raise ValueError(
            f"Chunk size {chunk_size} must be a positive multiple of "
            f"{CHUNK_SIZE_ALIGNMENT} bytes (256 KB)"
        )


def parse_range_header(value: Optional[str]) -> int:
    """
    Number of bytes the server has stored, from a 'bytes=0-N' header.

    A missing header means nothing was stored yet.
    """
    if not value:
        return 0
    match = _RANGE_PATTERN.search(value)
    if not match:
        raise BatchJobTransferError(
            HTTP_RESUME_INCOMPLETE, f"Unparseable Range header {value!r}"
        )
    return int(match.group(2)) + 1


class ResumableTransfer:
    """
    Uploads request bodies and downloads batch job results.

    Reuses one HTTP session for all requests; the session is created lazily
    and closed by close() when this object owns it.

    Example:
        >>> transfer = ResumableTransfer(AdsConfig(), use_chunking=True)
        >>> session_uri = await transfer.get_resumable_upload_url(upload_url)
        >>> await transfer.upload(session_uri, body)
    """

    def __init__(
        self,
        config: Optional[AdsConfig] = None,
        use_chunking: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        session: Optional[aiohttp.ClientSession] = None,
        usage_registry: Optional[UsageRecorderProtocol] = None,
        retry_strategy: Optional[RetryStrategy] = None
    ):
        """
        Initialize the transfer.

        Args:
            config: Client configuration (defaults if not provided)
            use_chunking: Send the body in chunk_size pieces
            chunk_size: Chunk size in bytes, a multiple of 256 KB
            session: Optional shared aiohttp session
            usage_registry: Registry rendered into the User-Agent header
            retry_strategy: Policy for transient chunk failures

        Raises:
            ValueError: If chunk_size is not a positive multiple of 256 KB
        """
        validate_chunk_size(chunk_size)
        self._config = config or AdsConfig.default()
        self._use_chunking = use_chunking
        self._chunk_size = chunk_size
        self._session = session
        self._owns_session = False
        self._usage_registry = usage_registry
        self._retry = retry_strategy or ExponentialBackoffStrategy(self._config.retry)

    @property
    def use_chunking(self) -> bool:
        return self._use_chunking

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(**self._config.get_connector_kwargs()),
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close session if we own it."""
        if self._owns_session and self._session:
            await self._session.close()
            self._session = None
            self._owns_session = False

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        user_agent = self._config.user_agent
        if self._usage_registry is not None:
            usage = self._usage_registry.text()
            if usage:
                user_agent = f"{user_agent} ({usage})"
        headers = {'User-Agent': user_agent}
        if extra:
            headers.update(extra)
        return headers

    def _request_kwargs(self) -> Dict[str, object]:
        proxy = self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None
        return {'proxy': proxy} if proxy else {}

    async def get_resumable_upload_url(self, url: str) -> str:
        """
        Exchange a batch job upload URL for a resumable session URI.

        Args:
            url: The upload URL returned by the batch job service

        Returns:
            Session URI to pass to upload()

        Raises:
            BatchJobTransferError: If the server does not open a session
        """
        session = await self._get_session()
        headers = self._headers({
            'Content-Type': 'application/xml',
            'Content-Length': '0',
            'x-goog-resumable': 'start',
        })
        async with session.request(
            'POST', url, data=b'', headers=headers, **self._request_kwargs()
        ) as response:
            if response.status != 201:
                text = await response.text()
                raise BatchJobTransferError(response.status, text[:200], url)
            location = response.headers.get('Location')
            if not location:
                raise BatchJobTransferError(
                    response.status, "Response has no Location header", url
                )
        logger.debug("Resumable upload session opened")
        return location

    async def get_upload_progress(self, url: str, total_size: int) -> int:
        """
        Ask the server how many bytes of an upload it already stored.

        Args:
            url: Session URI
            total_size: Size of the complete body

        Returns:
            Number of bytes stored (total_size when the upload is complete)
        """
        session = await self._get_session()
        headers = self._headers({
            'Content-Length': '0',
            'Content-Range': f'bytes */{total_size}',
        })
        async with session.request(
            'PUT', url, data=b'', headers=headers, **self._request_kwargs()
        ) as response:
            if response.status in (200, 201):
                return total_size
            if response.status == HTTP_RESUME_INCOMPLETE:
                return parse_range_header(response.headers.get('Range'))
            text = await response.text()
            raise BatchJobTransferError(response.status, text[:200], url)

    async def upload(
        self,
        url: str,
        data: bytes,
        resume_previous_upload: bool = False
    ) -> None:
        """
        Upload a body to a resumable session URI.

        Args:
            url: Session URI
            data: Complete body
            resume_previous_upload: Continue from what the server already has

        Raises:
            ValueError: If data is empty
            BatchJobTransferError: On unexpected HTTP status
            aiohttp.ClientError: If a network error persists past retries
        """
        if not data:
            raise ValueError("Cannot upload empty body")

        total = len(data)
        position = 0
        # Ask the server for its offset before the next PUT
        query_progress = resume_previous_upload

        upload_start = time.time()
        retries = 0
        while True:
            try:
                if query_progress:
                    position = await self.get_upload_progress(url, total)
                    query_progress = False
                    logger.info(f"Continuing upload at byte {position} of {total}")
                    if position >= total:
                        logger.info("Upload already complete")
                        return
                if self._use_chunking:
                    end = min(position + self._chunk_size, total)
                else:
                    end = total
                committed = await self._put_range(url, data, position, end, total)
            except (BatchJobTransferError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                if not self._retry.should_retry(e, retries):
                    logger.error(f"Upload failed at byte {position} of {total}: {e}")
                    raise
                logger.warning(f"Transient upload failure at byte {position} (retry {retries + 1}): {e}")
                await self._retry.wait_async(retries)
                retries += 1
                query_progress = True
                continue

            if committed <= position:
                raise BatchJobTransferError(
                    HTTP_RESUME_INCOMPLETE,
                    f"Upload made no progress at byte {position}",
                    url
                )
            position = committed
            retries = 0
            if position >= total:
                break

        upload_time = time.time() - upload_start
        size_kb = total / 1024
        logger.info(f"Uploaded {size_kb:.1f} KB in {upload_time:.2f}s")

    async def _put_range(
        self,
        url: str,
        data: bytes,
        start: int,
        end: int,
        total: int
    ) -> int:
        """PUT data[start:end]; returns the number of bytes the server now has."""
        session = await self._get_session()
        headers = self._headers({
            'Content-Type': 'application/xml',
            'Content-Range': f'bytes {start}-{end - 1}/{total}',
        })
        logger.debug(f"Sending bytes {start}-{end - 1}/{total}")
        async with session.request(
            'PUT', url, data=data[start:end], headers=headers, **self._request_kwargs()
        ) as response:
            if response.status in (200, 201):
                return total
            if response.status == HTTP_RESUME_INCOMPLETE:
                return parse_range_header(response.headers.get('Range'))
            text = await response.text()
            raise BatchJobTransferError(response.status, text[:200], url)

    async def download_results(self, url: str) -> str:
        """
        Download batch job results.

        Args:
            url: Download URL of a finished batch job

        Returns:
            Result document text

        Raises:
            BatchJobTransferError: On non-200 status
        """
        session = await self._get_session()
        download_start = time.time()
        async with session.request(
            'GET', url, headers=self._headers(), **self._request_kwargs()
        ) as response:
            if response.status != 200:
                text = await response.text()
                raise BatchJobTransferError(response.status, text[:200], url)
            contents = await response.text(encoding='utf-8')
        download_time = time.time() - download_start
        logger.debug(f"Downloaded {len(contents)} chars in {download_time:.2f}s")
        return contents
