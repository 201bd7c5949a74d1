"""
Shared infrastructure helpers (logging).
"""

from .logger import ContextLogger, configure_logging, get_workflow_logger, setup_logging

__all__ = [
    "ContextLogger",
    "configure_logging",
    "get_workflow_logger",
    "setup_logging",
]
