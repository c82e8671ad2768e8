"""
Result persistence: machine readable JSON plus a human readable README.
"""

import os
import logging
from datetime import datetime

RESULTS_DIR_NAME = "results"
RESULT_FILE_NAME = "upload-result.json"
README_FILE_NAME = "README.md"


def generate_batch_readme(result, config, both_versions):
    """Build the README text for a batch run."""
    suffix = config.metadata_suffix
    lines = [
        "# Pinata Batch Upload Result",
        "",
        "## Upload Time",
        datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        "",
        "## Summary",
        f"- Image count: {result.image_count}",
        f"- Images folder CID: {result.images_folder_cid}",
    ]

    uris = []
    if result.metadata_with_suffix_cid:
        lines.append(f"- Metadata folder CID ({suffix} suffix): {result.metadata_with_suffix_cid}")
        uris.append((f"{suffix} suffix", result.metadata_with_suffix_cid))
    if result.metadata_without_suffix_cid:
        lines.append(f"- Metadata folder CID (no suffix): {result.metadata_without_suffix_cid}")
        uris.append(("no suffix", result.metadata_without_suffix_cid))

    if both_versions:
        lines.append(f"- File format: with {suffix} suffix + without suffix (compatible with all NFT contracts)")
    elif result.metadata_with_suffix_cid:
        lines.append(f"- File format: with {suffix} suffix")
    else:
        lines.append("- File format: without suffix (standard NFT contract format)")

    lines += ["", "## Links"]
    for label, cid in uris:
        lines.append(f"- Base URI ({label}): ipfs://{cid}/")
        lines.append(f"- Gateway ({label}): {config.gateway_url(cid)}/")
    lines.append(f"- Images gateway: {config.gateway_url(result.images_folder_cid)}/")

    lines += ["", "## Usage"]
    if len(uris) > 1:
        lines.append("Choose the Base URI that matches your NFT contract:")
        for label, cid in uris:
            lines.append(f"- {label}: `ipfs://{cid}/`")
    elif uris:
        lines.append(f"Set the Base URI in your smart contract to: `ipfs://{uris[0][1]}/`")

    return "\n".join(lines) + "\n"


def generate_single_readme(result, output_dir):
    """Build the README text for a single file run."""
    lines = [
        "# Pinata Single File Upload Result",
        "",
        "## Upload Time",
        datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
        "",
        "## Summary",
        f"- Image CID: {result.image_cid}",
        f"- Metadata CID: {result.metadata_cid}",
        "",
        "## Links",
        f"- Image: {result.gateway_image_url}",
        f"- Metadata: {result.gateway_metadata_url}",
        f"- Token URI: {result.metadata_url}",
        "",
        "## Files",
        "```",
        f"{os.path.basename(os.path.normpath(output_dir))}/",
        "├── results/",
        f"│   └── {RESULT_FILE_NAME}     # detailed upload result",
        f"└── {README_FILE_NAME}                  # this file",
        "```",
    ]
    return "\n".join(lines) + "\n"


def _save(file_manager, output_dir, result, readme, logger):
    results_dir = file_manager.create_directory(os.path.join(output_dir, RESULTS_DIR_NAME))

    result_path = file_manager.write_json(os.path.join(results_dir, RESULT_FILE_NAME), result.to_dict())
    logger.info(f"📄 Upload result saved to: {result_path}")

    readme_path = file_manager.write_text(os.path.join(output_dir, README_FILE_NAME), readme)
    logger.info(f"📄 README saved to: {readme_path}")

    return result_path, readme_path


def save_batch_results(file_manager, output_dir, result, config, both_versions, logger=None):
    """Write upload-result.json and README.md for a batch run. Write failures propagate."""
    logger = logger or logging.getLogger(__name__)
    readme = generate_batch_readme(result, config, both_versions)
    return _save(file_manager, output_dir, result, readme, logger)


def save_single_results(file_manager, output_dir, result, logger=None):
    logger = logger or logging.getLogger(__name__)
    readme = generate_single_readme(result, output_dir)
    return _save(file_manager, output_dir, result, readme, logger)
