#!/usr/bin/env python3
"""
Integration test for the NFT metadata pinner.
Wires the real client and workflows together with only the HTTP session mocked.
"""

import os
import sys
import json
import shutil
import tempfile
from unittest.mock import Mock, patch

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


def test_imports():
    """Test that all modules can be imported successfully."""
    from nft_pinner import config
    from nft_pinner import file_manager
    from nft_pinner import pinata_client
    from nft_pinner import batch_processor
    from nft_pinner import single_processor
    import main

    assert callable(main.main)
    assert config.DEFAULT_METADATA_SUFFIX == ".json"


def test_client_interface():
    """Test PinataClient exposes every remote operation."""
    from nft_pinner.config import Config
    from nft_pinner.pinata_client import PinataClient

    client = PinataClient(Config(pinata_jwt='jwt', pinata_gateway='https://gw'), session=Mock(headers={}))

    for method in ['authenticate', 'upload_directory', 'upload_single_file', 'upload_metadata',
                   'pin_by_cid', 'check_pin_queue', 'upload_test_file']:
        assert callable(getattr(client, method)), method


def _pinata_session(folder_cids):
    """A fake session that answers pinFileToIPFS with a CID per uploaded folder name."""
    session = Mock(headers={})
    uploads = []

    def request(method, url, timeout=None, **kwargs):
        response = Mock()
        if url.endswith("/pinning/pinFileToIPFS"):
            names = [entry[1][0] for entry in kwargs["files"]]
            uploads.append(names)
            folder = json.loads(kwargs["data"]["pinataMetadata"])["name"]
            response.json.return_value = {"IpfsHash": folder_cids[folder]}
        else:
            response.json.return_value = {}
        return response

    session.request.side_effect = request
    return session, uploads


def test_batch_end_to_end():
    """Test a dual variant batch run through the real client."""
    from nft_pinner.config import Config
    from nft_pinner.pinata_client import PinataClient
    from nft_pinner.batch_processor import BatchProcessor

    temp_dir = tempfile.mkdtemp()
    try:
        images_dir = os.path.join(temp_dir, "batch_images")
        os.makedirs(images_dir)
        for name in ["1.png", "2.png", "3.png"]:
            with open(os.path.join(images_dir, name), 'wb') as f:
                f.write(b"png")

        session, uploads = _pinata_session({
            "batch_images": "QmImages",
            "metadata-with-suffix": "QmWith",
            "metadata-without-suffix": "QmWithout",
        })
        config = Config(pinata_jwt='jwt', pinata_gateway='https://gw', retry_delay_ms=0)
        logger = Mock()
        client = PinataClient(config, logger=logger, session=session)

        with patch('nft_pinner.batch_processor.tqdm'):
            result = BatchProcessor(client, config, logger=logger).process_batch_collection(
                generate_both_versions=True,
                images_dir=images_dir,
                output_base=os.path.join(temp_dir, "output"),
            )

        assert uploads == [
            ["batch_images/1.png", "batch_images/2.png", "batch_images/3.png"],
            ["metadata-with-suffix/1.json", "metadata-with-suffix/2.json", "metadata-with-suffix/3.json"],
            ["metadata-without-suffix/1", "metadata-without-suffix/2", "metadata-without-suffix/3"],
        ]
        assert result.images_folder_cid == "QmImages"
        assert result.metadata_with_suffix_cid == "QmWith"
        assert result.metadata_without_suffix_cid == "QmWithout"
        assert result.image_count == 3
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)


if __name__ == "__main__":
    test_imports()
    test_client_interface()
    test_batch_end_to_end()
    print("✅ All integration checks passed")
