"""
sealkit - Configuration

Environment-driven settings for hosts of the library (the CLI in this
package). The codecs themselves never read the environment: keys and
secrets are always passed in by the caller.
"""

import logging
import os
import sys
from typing import Optional, Union

# =============================================================================
# Configuration
# =============================================================================

LOG_LEVEL = os.environ.get('SEALKIT_LOG_LEVEL', 'WARNING')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Defaults for the command line only
DEFAULT_KEY = os.environ.get('SEALKIT_KEY')
DEFAULT_SECRET = os.environ.get('SEALKIT_SECRET')


def setup_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Configure a stderr handler for the sealkit loggers.

    Args:
        level: Level name or number (default: SEALKIT_LOG_LEVEL)

    Returns:
        The package logger
    """
    resolved = level if level is not None else LOG_LEVEL
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level or LOG_LEVEL}")

    logger = logging.getLogger('sealkit')
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(resolved)
    return logger
