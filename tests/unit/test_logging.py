"""Tests for logging helpers."""
import logging

import adsbatch
from adsbatch.core.logging import get_logger


class TestLogging:
    """Test suite for adsbatch logging."""
    
    def test_get_logger_propagates(self):
        """Test loggers propagate to root."""
        logger = get_logger('adsbatch.test')
        
        assert logger.name == 'adsbatch.test'
        assert logger.propagate
    
    def test_setup_logging_sets_levels(self):
        """Test setup_logging configures package loggers."""
        adsbatch.setup_logging(logging.DEBUG)
        
        assert logging.getLogger('adsbatch.batch').level == logging.DEBUG
        assert logging.getLogger('adsbatch.batch.transfer').level == logging.DEBUG
        
        adsbatch.setup_logging(logging.WARNING)
        assert logging.getLogger('adsbatch.batch').level == logging.WARNING
