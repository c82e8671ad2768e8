"""
Unit tests for main module.
"""

import unittest
from unittest.mock import Mock, patch

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import main
from nft_pinner.config import ConfigError


@patch('main.SingleFileProcessor')
@patch('main.BatchProcessor')
@patch('main.PinataClient')
@patch('main.load_config')
@patch('main.setup_logging')
class TestMain(unittest.TestCase):
    """Test main entry point dispatch."""

    def run_main(self, argv, mock_setup_logging, mock_load_config, mock_client_class, authenticated=True):
        self.logger = Mock()
        mock_setup_logging.return_value = self.logger
        mock_load_config.return_value = Mock(metadata_suffix='.json', log_level='INFO')
        self.uploader = Mock()
        self.uploader.authenticate.return_value = authenticated
        mock_client_class.return_value = self.uploader

        with self.assertRaises(SystemExit) as ctx:
            main.main(argv)
        return ctx.exception.code

    def logged(self, level):
        return [call.args[0] for call in getattr(self.logger, level).call_args_list]

    def test_default_batch_both_versions(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        """Test that no arguments runs a dual variant batch."""
        code = self.run_main([], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 0)
        mock_batch.assert_called_once()
        kwargs = mock_batch.return_value.process_batch_collection.call_args.kwargs
        self.assertTrue(kwargs['generate_both_versions'])
        self.assertEqual(kwargs['images_dir'], main.BATCH_IMAGES_DIR)
        mock_single.assert_not_called()

    def test_batch_no_suffix(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        code = self.run_main(['batch', '--no-suffix', '--images-dir', 'imgs'], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 0)
        kwargs = mock_batch.return_value.process_batch_collection.call_args.kwargs
        self.assertFalse(kwargs['generate_both_versions'])
        self.assertEqual(kwargs['images_dir'], 'imgs')

    def test_single(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        code = self.run_main(['single', '--token-id', '9'], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 0)
        kwargs = mock_single.return_value.process_single_file.call_args.kwargs
        self.assertEqual(kwargs['token_id'], 9)
        self.assertEqual(kwargs['image_dir'], main.SINGLE_IMAGE_DIR)
        mock_batch.assert_not_called()

    def test_test_mode(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        code = self.run_main(['test'], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 0)
        self.uploader.upload_test_file.assert_called_once()

    def test_pin_with_cid(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        code = self.run_main(['pin', 'QmPin'], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 0)
        self.uploader.pin_by_cid.assert_called_once_with('QmPin')

    def test_pin_without_cid(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        """Test that pin without a CID exits non-zero."""
        code = self.run_main(['pin'], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 1)
        self.uploader.pin_by_cid.assert_not_called()
        self.assertTrue(any("CID" in message for message in self.logged('error')))

    def test_queue(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        code = self.run_main(['queue'], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 0)
        self.uploader.check_pin_queue.assert_called_once()

    def test_authentication_failure(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        """Test that a failed authentication aborts before any work."""
        code = self.run_main([], mock_logging, mock_config, mock_client, authenticated=False)

        self.assertEqual(code, 1)
        mock_batch.assert_not_called()
        self.assertTrue(any("authentication failed" in message for message in self.logged('error')))

    def test_config_error(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        """Test that missing credentials fail the run with a logged error."""
        self.logger = Mock()
        mock_logging.return_value = self.logger
        mock_config.side_effect = ConfigError("PINATA_JWT is not set")

        with self.assertRaises(SystemExit) as ctx:
            main.main([])

        self.assertEqual(ctx.exception.code, 1)
        mock_client.assert_not_called()
        self.assertTrue(any("PINATA_JWT" in message for message in self.logged('error')))
        self.assertTrue(any("Total execution time" in message for message in self.logged('info')))

    def test_unhandled_failure(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        mock_batch.return_value.process_batch_collection.side_effect = RuntimeError("upload exhausted")

        code = self.run_main([], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 1)
        self.assertTrue(any("upload exhausted" in message for message in self.logged('error')))
        self.assertTrue(any("Total execution time" in message for message in self.logged('info')))

    def test_keyboard_interrupt(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        mock_batch.return_value.process_batch_collection.side_effect = KeyboardInterrupt

        code = self.run_main([], mock_logging, mock_config, mock_client)

        self.assertEqual(code, 1)

    def test_log_level_argument(self, mock_logging, mock_config, mock_client, mock_batch, mock_single):
        self.run_main(['test', '--log-level', 'DEBUG'], mock_logging, mock_config, mock_client)

        mock_logging.assert_called_once_with('DEBUG')


if __name__ == '__main__':
    unittest.main()
