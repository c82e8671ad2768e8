"""
Batch collection workflow: upload an image folder, generate metadata for every
image and upload the metadata folder(s).
"""

import os
import time
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from tqdm import tqdm

from .config import BATCH_IMAGES_DIR, OUTPUT_DIR
from .file_manager import FileManager, ValidationError
from .metadata import build_metadata, serialize_metadata
from .models import BatchUploadResult, MetadataFileEntry
from .report_writer import RESULT_FILE_NAME, RESULTS_DIR_NAME, save_batch_results

WITH_SUFFIX_DIR_NAME = "metadata-with-suffix"
WITHOUT_SUFFIX_DIR_NAME = "metadata-without-suffix"

WITH_SUFFIX = "with_suffix"
WITHOUT_SUFFIX = "without_suffix"


@dataclass(frozen=True)
class MetadataVariant:
    """One naming convention for metadata files and the scratch directory staging it."""

    kind: str
    suffix: str
    directory: str

    @property
    def label(self):
        return f"with {self.suffix} suffix" if self.kind == WITH_SUFFIX else "without suffix"


class BatchProcessor:
    """Runs a batch upload of a numbered image collection."""

    def __init__(self, uploader, config, file_manager=None, logger=None):
        self.uploader = uploader
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.file_manager = file_manager or FileManager(self.logger)

    def validate_input(self, images_dir):
        """Return the image names in token ID order, or raise ValidationError."""
        if not os.path.isdir(images_dir):
            raise ValidationError(f"❌ Input directory does not exist: {images_dir}")

        image_files = self.file_manager.get_image_files(images_dir)
        if not image_files:
            raise ValidationError(f"❌ No image files found in: {images_dir}")

        return self.file_manager.sort_by_token_id(image_files)

    def plan_variants(self, output_dir, generate_both_versions):
        """Decide which metadata variants to build and where to stage each one.

        Every variant gets its own directory: the folder CID depends on the
        exact file set, so sharing a directory would collapse both uploads
        into the same CID.
        """
        suffix = self.config.metadata_suffix

        if generate_both_versions:
            variants = [
                MetadataVariant(WITH_SUFFIX, suffix, os.path.join(output_dir, WITH_SUFFIX_DIR_NAME)),
                MetadataVariant(WITHOUT_SUFFIX, "", os.path.join(output_dir, WITHOUT_SUFFIX_DIR_NAME)),
            ]
        elif suffix:
            variants = [MetadataVariant(WITH_SUFFIX, suffix, os.path.join(output_dir, WITH_SUFFIX_DIR_NAME))]
        else:
            variants = [MetadataVariant(WITHOUT_SUFFIX, "", os.path.join(output_dir, WITHOUT_SUFFIX_DIR_NAME))]

        directories = [os.path.abspath(variant.directory) for variant in variants]
        if len(set(directories)) != len(directories):
            raise ValueError(f"Metadata variants must use distinct directories, got: {directories}")

        return variants

    def write_metadata_files(self, variants, image_files, images_cid):
        """Write one metadata file per image into each variant's fresh directory."""
        for variant in variants:
            self.file_manager.cleanup_directory(variant.directory)
            self.file_manager.create_directory(variant.directory)

        with tqdm(total=len(image_files) * len(variants), unit='file', desc='Writing metadata',
                  ncols=100, leave=False) as pbar:
            for file_name in image_files:
                token_id = os.path.splitext(file_name)[0]
                content = serialize_metadata(build_metadata(
                    token_id,
                    images_cid,
                    file_name,
                    self.config.collection_name,
                    self.config.collection_description,
                ))

                for variant in variants:
                    self.file_manager.write_text(os.path.join(variant.directory, f"{token_id}{variant.suffix}"), content)
                    pbar.update(1)

    def generate_and_upload_metadata(self, variants, image_files, images_cid):
        """Write and upload every variant. Scratch directories are always removed."""
        cids = {}
        try:
            self.write_metadata_files(variants, image_files, images_cid)

            for variant in variants:
                self.logger.info(f"📁 Uploading metadata folder ({variant.label})...")
                cids[variant.kind] = self.uploader.upload_directory(variant.directory)
                self.logger.info(f"✅ Metadata folder ({variant.label}) uploaded! CID: {cids[variant.kind]}")
        finally:
            for variant in variants:
                self.file_manager.cleanup_directory(variant.directory)

        return cids

    def process_batch_collection(self, generate_both_versions=True, images_dir=None, output_base=None):
        """Upload the image folder and its metadata, then persist the result record."""
        started = time.monotonic()
        images_dir = images_dir or BATCH_IMAGES_DIR
        output_base = output_base or OUTPUT_DIR

        self.logger.info("🚀 Starting batch NFT collection processing")
        image_files = self.validate_input(images_dir)

        self.logger.info("📁 Uploading images folder...")
        images_cid = self.uploader.upload_directory(images_dir)
        self.logger.info(f"✅ Images folder uploaded! CID: {images_cid}")
        self.logger.info(f"   - Access path: ipfs://{images_cid}/{image_files[0]}")
        self.logger.info(f"   - Gateway: {self.config.gateway_url(images_cid)}/")

        image_paths = [os.path.join(images_dir, name) for name in image_files]
        total_size, warnings = self.file_manager.validate_files(
            image_paths, self.config.max_file_size, self.config.max_total_size)
        for warning in warnings:
            self.logger.warning(f"⚠️  {warning}")

        output_dir = self.file_manager.create_timestamped_output_dir(output_base, "batch-upload")
        variants = self.plan_variants(output_dir, generate_both_versions)
        if generate_both_versions and not self.config.metadata_suffix:
            self.logger.warning("⚠️  METADATA_SUFFIX is empty, both metadata variants will contain identical file names")

        cids = self.generate_and_upload_metadata(variants, image_files, images_cid)

        suffix = self.config.metadata_suffix
        result = BatchUploadResult(
            timestamp=datetime.now(timezone.utc).isoformat(),
            images_folder_cid=images_cid,
            image_count=len(image_files),
            total_size_bytes=total_size,
            upload_duration_ms=int((time.monotonic() - started) * 1000),
            metadata_with_suffix_cid=cids.get(WITH_SUFFIX),
            metadata_without_suffix_cid=cids.get(WITHOUT_SUFFIX),
            metadata_files=[
                MetadataFileEntry(
                    token_id=os.path.splitext(name)[0],
                    metadata_file_with_suffix=f"{os.path.splitext(name)[0]}{suffix}",
                    metadata_file_without_suffix=os.path.splitext(name)[0],
                )
                for name in image_files
            ],
        )

        save_batch_results(self.file_manager, output_dir, result, self.config, generate_both_versions, self.logger)
        self.log_summary(result, output_dir)
        return result

    def log_summary(self, result, output_dir):
        self.logger.info("✨ Batch process completed")
        self.logger.info("📊 Upload statistics:")
        self.logger.info(f"   - Image count: {result.image_count}")
        self.logger.info(f"   - Images folder CID: {result.images_folder_cid}")
        if result.metadata_with_suffix_cid:
            self.logger.info(
                f"   - Metadata CID ({self.config.metadata_suffix} suffix): {result.metadata_with_suffix_cid}")
            self.logger.info(f"     Base URI: ipfs://{result.metadata_with_suffix_cid}/")
        if result.metadata_without_suffix_cid:
            self.logger.info(f"   - Metadata CID (no suffix): {result.metadata_without_suffix_cid}")
            self.logger.info(f"     Base URI: ipfs://{result.metadata_without_suffix_cid}/")
        self.logger.info(
            f"📄 Detailed result saved to: {os.path.join(output_dir, RESULTS_DIR_NAME, RESULT_FILE_NAME)}")
