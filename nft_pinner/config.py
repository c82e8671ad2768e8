"""
Configuration module for the NFT metadata pinner.
Contains defaults, environment loading, and command line parsing.
"""

import os
import argparse
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

# ==============================================================================
# DEFAULTS
# ==============================================================================

DEFAULT_PINATA_API_URL = "https://api.pinata.cloud"
DEFAULT_METADATA_SUFFIX = ".json"
SUPPORTED_METADATA_SUFFIXES = ("", ".json", ".yaml", ".yml")

DEFAULT_UPLOAD_TIMEOUT_MS = 300000
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 5000
DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024
DEFAULT_MAX_TOTAL_SIZE = 500 * 1024 * 1024

DEFAULT_COLLECTION_NAME = "MetaCore"
DEFAULT_COLLECTION_DESCRIPTION = "A unique member of the MetaCore collection."
DEFAULT_LOG_LEVEL = "INFO"

# Heartbeat interval for long running uploads
PROGRESS_INTERVAL_SECONDS = 10

# Supported image file extensions
IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif')

# ==============================================================================
# DIRECTORIES
# ==============================================================================

ASSETS_DIR = "assets"
BATCH_IMAGES_DIR = os.path.join(ASSETS_DIR, "batch_images")
SINGLE_IMAGE_DIR = os.path.join(ASSETS_DIR, "image")
OUTPUT_DIR = "output"

COMMANDS = ("single", "batch", "test", "pin", "queue")


class ConfigError(ValueError):
    """Raised when required settings are missing or malformed."""


@dataclass(frozen=True)
class Config:
    """Settings resolved once at startup and shared read-only."""

    pinata_jwt: str
    pinata_gateway: str
    pinata_api_url: str = DEFAULT_PINATA_API_URL
    metadata_suffix: str = DEFAULT_METADATA_SUFFIX
    upload_timeout_ms: int = DEFAULT_UPLOAD_TIMEOUT_MS
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_delay_ms: int = DEFAULT_RETRY_DELAY_MS
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_total_size: int = DEFAULT_MAX_TOTAL_SIZE
    collection_name: str = DEFAULT_COLLECTION_NAME
    collection_description: str = DEFAULT_COLLECTION_DESCRIPTION
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def upload_timeout_seconds(self) -> float:
        return self.upload_timeout_ms / 1000

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000

    def gateway_url(self, cid: str, path: str = "") -> str:
        """Build a public gateway URL for a CID, optionally with a file path."""
        url = f"{self.pinata_gateway}/ipfs/{cid}"
        if path:
            url = f"{url}/{path.lstrip('/')}"
        return url


def _normalize_gateway(gateway: str) -> str:
    gateway = gateway.strip().rstrip('/')
    if not gateway.startswith(("http://", "https://")):
        gateway = f"https://{gateway}"
    return gateway


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {value}")
    return value


def _read_suffix(environ: Mapping[str, str]) -> str:
    # An explicitly empty METADATA_SUFFIX means "no suffix"
    suffix = environ.get('METADATA_SUFFIX')
    if suffix is None:
        return DEFAULT_METADATA_SUFFIX
    suffix = suffix.strip()
    if suffix not in SUPPORTED_METADATA_SUFFIXES:
        logging.getLogger(__name__).warning(
            f"⚠️  Unsupported metadata suffix {suffix!r}, using default {DEFAULT_METADATA_SUFFIX!r}")
        return DEFAULT_METADATA_SUFFIX
    return suffix


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration from the environment (and a .env file when reading os.environ)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    pinata_jwt = environ.get('PINATA_JWT', '').strip()
    pinata_gateway = environ.get('PINATA_GATEWAY', '').strip()

    if not pinata_jwt:
        raise ConfigError("❌ PINATA_JWT is not set. Please add it to your .env file.")
    if not pinata_gateway:
        raise ConfigError("❌ PINATA_GATEWAY is not set. Please add it to your .env file.")

    return Config(
        pinata_jwt=pinata_jwt,
        pinata_gateway=_normalize_gateway(pinata_gateway),
        pinata_api_url=environ.get('PINATA_API_URL', DEFAULT_PINATA_API_URL).rstrip('/'),
        metadata_suffix=_read_suffix(environ),
        upload_timeout_ms=_read_int(environ, 'UPLOAD_TIMEOUT', DEFAULT_UPLOAD_TIMEOUT_MS),
        max_retries=_read_int(environ, 'MAX_RETRIES', DEFAULT_MAX_RETRIES),
        retry_delay_ms=_read_int(environ, 'RETRY_DELAY', DEFAULT_RETRY_DELAY_MS),
        max_file_size=_read_int(environ, 'MAX_FILE_SIZE', DEFAULT_MAX_FILE_SIZE),
        max_total_size=_read_int(environ, 'MAX_TOTAL_SIZE', DEFAULT_MAX_TOTAL_SIZE),
        collection_name=environ.get('COLLECTION_NAME', DEFAULT_COLLECTION_NAME),
        collection_description=environ.get('COLLECTION_DESCRIPTION', DEFAULT_COLLECTION_DESCRIPTION),
        log_level=environ.get('LOG_LEVEL', DEFAULT_LOG_LEVEL).upper(),
    )


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Generate NFT metadata and pin images plus metadata to IPFS via Pinata")
    parser.add_argument("command", nargs="?", choices=COMMANDS, default="batch",
                        help="single, batch, test, pin or queue (default: batch)")
    parser.add_argument("cid", nargs="?", help="CID to pin (pin command only)")
    parser.add_argument("--no-suffix", action="store_true",
                        help="Generate a single metadata variant named by METADATA_SUFFIX instead of both variants")
    parser.add_argument("--token-id", type=int, help="Token ID used for the single mode metadata name")
    parser.add_argument("--images-dir", type=str, help="Override the input image directory")
    parser.add_argument("--output-dir", type=str, default=OUTPUT_DIR, help="Base directory for run results (default: output)")
    parser.add_argument("--log-level", type=str, help="Logging level (default: LOG_LEVEL or INFO)")

    return parser.parse_args(argv)
