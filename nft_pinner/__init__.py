"""
NFT Metadata Pinner - generates NFT metadata for an image collection and pins
images plus metadata to IPFS through Pinata.

Supports single file and batch modes, and can produce metadata folders with and
without a file name suffix so the base URI can match either contract convention.
"""

__version__ = "1.0.0"

from .config import Config, ConfigError, load_config, parse_arguments
from .file_manager import FileManager, ValidationError
from .pinata_client import PinataClient, UploadError, UploadTimeoutError
from .batch_processor import BatchProcessor
from .single_processor import SingleFileProcessor

__all__ = [
    'Config',
    'ConfigError',
    'load_config',
    'parse_arguments',
    'FileManager',
    'ValidationError',
    'PinataClient',
    'UploadError',
    'UploadTimeoutError',
    'BatchProcessor',
    'SingleFileProcessor',
]
