"""Utility modules for the Workstation Inventory Tool."""

from .config_loader import load_config, create_output_directories, AppConfig, ProcessingMode
from .logger import setup_logger

__all__ = [
    'load_config',
    'create_output_directories',
    'AppConfig',
    'ProcessingMode',
    'setup_logger'
]
