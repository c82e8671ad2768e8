"""
NFT metadata construction.

Key order is fixed so the same inputs always serialize to the same bytes.
"""

import json


def build_metadata(token_id, images_cid, file_name, collection_name, description):
    """Metadata for one token of a batch collection, pointing into the image folder CID."""
    return {
        "name": f"{collection_name} #{token_id}",
        "description": description,
        "image": f"ipfs://{images_cid}/{file_name}",
        "attributes": [
            {"trait_type": "ID", "value": int(token_id)},
        ],
    }


def build_single_metadata(token_id, image_cid, collection_name, description="A single NFT example."):
    """Metadata for a standalone image pinned under its own CID."""
    return {
        "name": f"{collection_name} #{token_id}",
        "description": description,
        "image": f"ipfs://{image_cid}",
        "attributes": [
            {"trait_type": "Type", "value": "Single"},
        ],
    }


def serialize_metadata(metadata):
    return json.dumps(metadata, indent=2, ensure_ascii=False)
