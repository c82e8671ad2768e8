"""
Main application entry point for the NFT metadata pinner.
Handles the CLI interface and dispatches to the upload workflows.
"""

import os
import sys
import time

from nft_pinner.config import load_config, parse_arguments, DEFAULT_LOG_LEVEL, BATCH_IMAGES_DIR, SINGLE_IMAGE_DIR
from nft_pinner.logger import setup_logging
from nft_pinner.pinata_client import PinataClient
from nft_pinner.batch_processor import BatchProcessor
from nft_pinner.single_processor import SingleFileProcessor


def log_modes(logger):
    logger.info("📋 Upload modes:")
    logger.info("  🎯 single: upload one image + one metadata JSON")
    logger.info("  📦 batch: upload the image folder + a metadata folder per variant")
    logger.info("  🧪 test: upload a small test file")
    logger.info("  📌 pin: pin an existing CID")
    logger.info("  📊 queue: check the pin queue status")


def run_command(args, config, uploader, logger):
    """Dispatch the parsed command. Returns the process exit code."""
    if args.command == "single":
        logger.info("🎯 Selected: single file mode")
        processor = SingleFileProcessor(uploader, config, logger=logger)
        processor.process_single_file(
            image_dir=args.images_dir or SINGLE_IMAGE_DIR,
            output_base=args.output_dir,
            token_id=args.token_id,
        )

    elif args.command == "test":
        logger.info("🧪 Selected: test mode")
        uploader.upload_test_file()

    elif args.command == "pin":
        logger.info("📌 Selected: pin by CID mode")
        if not args.cid:
            logger.error("❌ Please provide a CID, e.g.: python main.py pin <CID>")
            return 1
        uploader.pin_by_cid(args.cid)

    elif args.command == "queue":
        logger.info("📊 Selected: pin queue status")
        uploader.check_pin_queue()

    else:
        logger.info("📦 Selected: batch mode")
        both_versions = not args.no_suffix
        if both_versions:
            logger.info(f"📝 Generating metadata with {config.metadata_suffix!r} suffix and without suffix")
        else:
            logger.info(f"📝 Generating a single metadata variant (suffix: {config.metadata_suffix!r})")

        processor = BatchProcessor(uploader, config, logger=logger)
        processor.process_batch_collection(
            generate_both_versions=both_versions,
            images_dir=args.images_dir or BATCH_IMAGES_DIR,
            output_base=args.output_dir,
        )

    return 0


def main(argv=None):
    """Main application entry point."""
    start_time = time.monotonic()
    args = parse_arguments(argv)
    logger = setup_logging(args.log_level or os.getenv('LOG_LEVEL', DEFAULT_LOG_LEVEL))
    exit_code = 0

    try:
        config = load_config()
        if not args.log_level:
            logger = setup_logging(config.log_level)
        uploader = PinataClient(config, logger=logger)

        if not uploader.authenticate():
            logger.error("❌ Pinata authentication failed, exiting")
            exit_code = 1
        else:
            log_modes(logger)
            exit_code = run_command(args, config, uploader, logger)

    except KeyboardInterrupt:
        logger.info("🛑 Process interrupted by user")
        exit_code = 1
    except Exception as e:
        logger.error(f"💥 Script failed: {e}")
        exit_code = 1
    finally:
        logger.info(f"⏱️  Total execution time: {int(time.monotonic() - start_time)} seconds")
        logger.info("🎉 Done, exiting...")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
