"""
Single image workflow: upload one image and a metadata file pointing at it.
"""

import os
import time
import logging
from datetime import datetime, timezone

from .config import OUTPUT_DIR, SINGLE_IMAGE_DIR
from .file_manager import FileManager, ValidationError
from .metadata import build_single_metadata
from .models import SingleUploadResult
from .report_writer import save_single_results


class SingleFileProcessor:
    """Uploads the first image found in the single image directory."""

    def __init__(self, uploader, config, file_manager=None, logger=None):
        self.uploader = uploader
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.file_manager = file_manager or FileManager(self.logger)

    def select_image(self, image_dir):
        if not os.path.isdir(image_dir):
            raise ValidationError(f"❌ Image directory does not exist: {image_dir}")

        image_files = self.file_manager.get_image_files(image_dir)
        if not image_files:
            raise ValidationError(f"❌ No image files found in: {image_dir}")

        return image_files[0]

    def process_single_file(self, image_dir=None, output_base=None, token_id=None):
        started = time.monotonic()
        image_dir = image_dir or SINGLE_IMAGE_DIR
        output_base = output_base or OUTPUT_DIR

        self.logger.info("🚀 Starting single file upload")
        image_name = self.select_image(image_dir)
        token_id = str(token_id) if token_id is not None else os.path.splitext(image_name)[0]
        self.logger.info(f"📁 Selected image: {image_name}")

        image_cid = self.uploader.upload_single_file(os.path.join(image_dir, image_name))

        metadata = build_single_metadata(token_id, image_cid, self.config.collection_name)
        metadata_cid = self.uploader.upload_metadata(metadata, f"{token_id}-metadata.json")

        result = SingleUploadResult(
            timestamp=datetime.now(timezone.utc).isoformat(),
            image_cid=image_cid,
            metadata_cid=metadata_cid,
            image_url=f"ipfs://{image_cid}",
            metadata_url=f"ipfs://{metadata_cid}",
            gateway_image_url=self.config.gateway_url(image_cid),
            gateway_metadata_url=self.config.gateway_url(metadata_cid),
            metadata=metadata,
            upload_duration_ms=int((time.monotonic() - started) * 1000),
        )

        output_dir = self.file_manager.create_timestamped_output_dir(output_base, "single-upload")
        save_single_results(self.file_manager, output_dir, result, self.logger)

        self.logger.info("✨ Single file process completed")
        self.logger.info(f"   - Image CID: {image_cid}")
        self.logger.info(f"   - Metadata CID: {metadata_cid}")
        self.logger.info(f"   - Token URI: ipfs://{metadata_cid}")
        return result
