"""
File management module for directory handling, size checks and image discovery.
"""

import os
import json
import shutil
import logging
from datetime import datetime, timezone

from .config import IMAGE_EXTENSIONS


class ValidationError(Exception):
    """Raised when the input directory or its images cannot be used."""


def format_size(size_bytes):
    """Render a byte count as B, KB or MB."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.2f} KB"
    return f"{size_bytes / 1024 / 1024:.2f} MB"


class FileManager:
    """Handles file operations and directory management."""

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(__name__)

    def create_directory(self, dir_path):
        """Create a directory (and parents). Failures propagate."""
        try:
            os.makedirs(dir_path, exist_ok=True)
        except OSError as e:
            self.logger.error(f"Failed to create directory {dir_path}: {e}")
            raise
        return dir_path

    def cleanup_directory(self, dir_path):
        """Remove a directory tree. Best effort: failures are only logged."""
        try:
            if os.path.exists(dir_path):
                shutil.rmtree(dir_path)
                self.logger.debug(f"🗑️  Removed directory: {dir_path}")
            return True
        except OSError as e:
            self.logger.warning(f"⚠️  Failed to clean up directory {dir_path}: {e}")
            return False

    def get_file_size(self, file_path):
        try:
            return os.path.getsize(file_path)
        except OSError as e:
            self.logger.error(f"Failed to get file size: {file_path} - {e}")
            raise

    def validate_files(self, file_paths, max_file_size, max_total_size):
        """Check sizes against the configured ceilings.

        Returns a ``(total_size, warnings)`` tuple. Oversized files and an
        oversized total only produce warnings, they never fail the run.
        """
        total_size = 0
        warnings = []

        for file_path in file_paths:
            try:
                size = self.get_file_size(file_path)
            except OSError:
                self.logger.warning(f"Could not read file size: {file_path}")
                continue

            total_size += size
            if size > max_file_size:
                warnings.append(f"File {os.path.basename(file_path)} is too large ({format_size(size)})")

        if total_size > max_total_size:
            warnings.append(f"Total size is too large ({format_size(total_size)})")

        return total_size, warnings

    def list_files(self, dir_path):
        """Get all files under a directory, recursively, in a stable order."""
        all_files = []
        for root, dirs, files in os.walk(dir_path):
            dirs.sort()
            for file in sorted(files):
                all_files.append(os.path.join(root, file))
        return all_files

    def get_image_files(self, dir_path):
        """Get the names of image files directly inside a directory."""
        return sorted(
            entry for entry in os.listdir(dir_path)
            if entry.lower().endswith(IMAGE_EXTENSIONS)
            and os.path.isfile(os.path.join(dir_path, entry))
        )

    def sort_by_token_id(self, file_names):
        """Sort image names by the integer value of their base name.

        Names whose base name is not a non-negative integer, or that share a
        token ID with another name, are rejected.
        """
        invalid = [name for name in file_names if not os.path.splitext(name)[0].isdigit()]
        if invalid:
            raise ValidationError(
                f"❌ Image file names must be numeric token IDs (e.g. 1.png), invalid: {', '.join(invalid)}")

        seen = {}
        for name in file_names:
            token_id = int(os.path.splitext(name)[0])
            if token_id in seen:
                raise ValidationError(f"❌ Duplicate token ID {token_id}: {seen[token_id]} and {name}")
            seen[token_id] = name

        return sorted(file_names, key=lambda name: int(os.path.splitext(name)[0]))

    def create_timestamped_output_dir(self, base_dir, prefix):
        """Create ``<base_dir>/<prefix>-<timestamp>`` for this run."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
        output_dir = os.path.join(base_dir, f"{prefix}-{timestamp}")
        self.create_directory(output_dir)
        self.logger.info(f"📂 Created output directory: {output_dir}")
        return output_dir

    def write_json(self, file_path, data):
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return file_path

    def write_text(self, file_path, text):
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(text)
        return file_path
