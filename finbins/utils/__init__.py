"""
Utility modules for FinBins
"""
from .config_loader import ClientConfig, load_client_config

__all__ = [
    'ClientConfig',
    'load_client_config',
]
