"""
Session context shared by batch job utilities.

Holds the client configuration, the feature usage registry and a lazily
created HTTP session that every utility bound to the user reuses.
"""
from typing import Optional

import aiohttp

from .core.api import AdsConfig
from .core.logging import get_logger
from .core.usage import FeatureUsageRegistry


class AdsUser:
    """
    Authenticated session context.
    
    Example:
        >>> async with AdsUser() as user:
        ...     utilities = BatchJobUtilities(user)
        ...     await utilities.upload(url, operations)
    """
    
    def __init__(
        self,
        config: Optional[AdsConfig] = None,
        usage_registry: Optional[FeatureUsageRegistry] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize the session context.
        
        Args:
            config: Client configuration (uses defaults if not provided)
            usage_registry: Registry for feature usage telemetry
            session: Optional externally managed aiohttp session
        """
        self._config = config or AdsConfig.default()
        self._usage_registry = usage_registry if usage_registry is not None else FeatureUsageRegistry()
        self._session = session
        self._owns_session = False
        self._logger = get_logger('adsbatch.user')
    
    @property
    def config(self) -> AdsConfig:
        """Get current configuration."""
        return self._config
    
    @property
    def usage_registry(self) -> FeatureUsageRegistry:
        return self._usage_registry
    
    async def __aenter__(self) -> 'AdsUser':
        await self.get_session()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
    
    async def get_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(**self._config.get_connector_kwargs()),
                **self._config.get_session_kwargs()
            )
            self._owns_session = True
            self._logger.debug("HTTP session created")
        return self._session
    
    async def close(self):
        """Close the HTTP session if this context created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None
            self._owns_session = False
