"""Logging utilities for adsbatch modules."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger that automatically inherits from root logger.
    
    Loggers propagate to the root logger so ``basicConfig()`` works without
    an explicit ``setup_logging()`` call. A default level is only set when
    the root logger has no handlers yet.
    
    Args:
        name: Logger name (typically 'adsbatch.<area>')
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)
    
    return logger
