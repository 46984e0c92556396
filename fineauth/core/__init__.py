"""
Core module - Contains configuration, logging, errors and the auth core.
"""

from fineauth.core.config import AuthConfig
from fineauth.core.logging import configure_logging, get_secure_logger, SecureLogFilter

__all__ = ["AuthConfig", "configure_logging", "get_secure_logger", "SecureLogFilter"]
