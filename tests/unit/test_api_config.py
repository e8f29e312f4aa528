"""Tests for configuration and retry policy."""
import asyncio
import pytest

import aiohttp

from adsbatch import AdsConfig, ProxyConfig, RetryConfig, SSLConfig
from adsbatch.core.api import ExponentialBackoffStrategy
from adsbatch.core.exceptions import BatchJobTransferError


class TestAdsConfig:
    """Test suite for AdsConfig."""
    
    def test_namespace(self):
        """Test namespace follows API version."""
        assert AdsConfig().namespace == 'https://adwords.google.com/api/adwords/cm/v201509'
        assert AdsConfig(api_version='v201601').namespace.endswith('/cm/v201601')
    
    def test_log_level_not_a_setting(self):
        """Test logging is configured through setup_logging only."""
        with pytest.raises(TypeError):
            AdsConfig(log_level=10)
    
    def test_with_proxy(self):
        """Test proxy helper."""
        config = AdsConfig.with_proxy('http://proxy:8080')
        
        assert config.proxy.to_aiohttp_proxy() == 'http://proxy:8080'
    
    def test_proxy_credentials(self):
        """Test credentials are inserted into proxy URL."""
        proxy = ProxyConfig(url='http://proxy:8080', username='u', password='p')
        
        assert proxy.to_aiohttp_proxy() == 'http://u:p@proxy:8080'
    
    def test_insecure(self):
        """Test insecure config disables verification."""
        config = AdsConfig.insecure()
        
        assert config.get_connector_kwargs()['ssl'] is False
    
    def test_ssl_context(self):
        """Test verifying config builds a context."""
        context = SSLConfig().create_ssl_context()
        
        assert context.check_hostname
    
    def test_session_kwargs(self):
        """Test headers merge user agent and extras."""
        config = AdsConfig(user_agent='tool/2', extra_headers={'X-Test': '1'})
        kwargs = config.get_session_kwargs()
        
        assert kwargs['headers'] == {'User-Agent': 'tool/2', 'X-Test': '1'}
        assert isinstance(kwargs['timeout'], aiohttp.ClientTimeout)


class TestRetry:
    """Test suite for retry configuration and strategy."""
    
    def test_delay_grows_and_caps(self):
        """Test exponential delay capped at max_delay."""
        config = RetryConfig(base_delay=1.0, max_delay=5.0)
        
        assert config.calculate_delay(0) == 1.0
        assert config.calculate_delay(2) == 4.0
        assert config.calculate_delay(10) == 5.0
    
    @pytest.fixture
    def strategy(self):
        return ExponentialBackoffStrategy(RetryConfig(max_retries=2, base_delay=0.0))
    
    def test_retry_transient_status(self, strategy):
        """Test 503 and 429 are retried."""
        assert strategy.should_retry(BatchJobTransferError(503, 'x'), 0)
        assert strategy.should_retry(BatchJobTransferError(429, 'x'), 1)
    
    def test_no_retry_client_error(self, strategy):
        """Test 4xx are not retried."""
        assert not strategy.should_retry(BatchJobTransferError(400, 'x'), 0)
    
    @pytest.mark.parametrize('status', [501, 505])
    def test_no_retry_unlisted_server_error(self, strategy, status):
        """Test only statuses in retry_on_status are retried."""
        assert not strategy.should_retry(BatchJobTransferError(status, 'x'), 0)
    
    def test_custom_retry_statuses(self):
        """Test retry_on_status drives the decision."""
        strategy = ExponentialBackoffStrategy(RetryConfig(retry_on_status=(501,)))
        
        assert strategy.should_retry(BatchJobTransferError(501, 'x'), 0)
        assert not strategy.should_retry(BatchJobTransferError(503, 'x'), 0)
    
    def test_network_errors(self, strategy):
        """Test connection errors and timeouts are retried."""
        assert strategy.should_retry(aiohttp.ClientConnectionError(), 0)
        assert strategy.should_retry(asyncio.TimeoutError(), 0)
        assert not strategy.should_retry(ValueError(), 0)
    
    def test_limit(self, strategy):
        """Test retries stop at max_retries."""
        assert not strategy.should_retry(BatchJobTransferError(503, 'x'), 2)
    
    @pytest.mark.asyncio
    async def test_wait(self, strategy):
        """Test waiting with zero delay returns."""
        await strategy.wait_async(0)
