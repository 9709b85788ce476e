"""
Configuration module for billing records.
"""
from .logging_config import LoggingConfig, configure_logging, reset_logging
from .settings import (
    BillingRecordsConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'BillingRecordsConfig',
    'LoggingConfig',
    'configure_logging',
    'get_config',
    'load_config',
    'reload_config',
    'reset_logging'
]
