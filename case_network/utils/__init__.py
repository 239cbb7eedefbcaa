"""Utility modules for case_network."""

from case_network.utils.logging_config import configure_logging

__all__ = ["configure_logging"]
