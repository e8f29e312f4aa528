"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod

import aiohttp

from ..config import RetryConfig
from ...exceptions import BatchJobTransferError


class RetryStrategy(ABC):
    """Abstract retry strategy."""
    
    @abstractmethod
    def should_retry(self, error: BaseException, retry_count: int) -> bool:
        """Determines if a failed transfer should be retried."""
        pass
    
    @abstractmethod
    async def wait_async(self, retry_count: int):
        """Waits before retry."""
        pass


class ExponentialBackoffStrategy(RetryStrategy):
    """Exponential backoff on transient transfer failures."""
    
    def __init__(self, config: RetryConfig = None):
        self._config = config or RetryConfig()
    
    @property
    def max_retries(self) -> int:
        return self._config.max_retries
    
    def should_retry(self, error: BaseException, retry_count: int) -> bool:
        """Retries on retryable HTTP statuses, connection errors and timeouts."""
        if retry_count >= self._config.max_retries:
            return False
        if isinstance(error, BatchJobTransferError):
            return error.status in self._config.retry_on_status
        return isinstance(error, (aiohttp.ClientConnectionError, asyncio.TimeoutError))
    
    async def wait_async(self, retry_count: int):
        """Waits with exponential backoff."""
        await asyncio.sleep(self._config.calculate_delay(retry_count))
