"""
Pinata client module for pinning files and folders to IPFS.
Wraps the Pinata REST API and adds retry and timeout handling for folder uploads.
"""

import os
import json
import time
import logging
import mimetypes
import threading
from contextlib import ExitStack

import requests

from .file_manager import FileManager, format_size
from .metadata import serialize_metadata
from .progress import ProgressTracker

# Timeout for the small, non-upload API calls
DEFAULT_REQUEST_TIMEOUT = 30

TEST_FILE_NAME = "test.txt"
TEST_FILE_CONTENT = b"Hello Pinata! This is a test file."


class UploadError(Exception):
    """Raised when an upload to Pinata fails."""


class UploadTimeoutError(UploadError):
    """Raised when an upload attempt does not finish before the deadline."""


def _media_type(file_name):
    mime, _ = mimetypes.guess_type(file_name)
    return mime or "application/octet-stream"


class PinataClient:
    """Handles Pinata operations for images and metadata."""

    def __init__(self, config, logger=None, session=None, file_manager=None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = config.pinata_api_url
        self.file_manager = file_manager or FileManager(self.logger)

        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {config.pinata_jwt}"})

    def _request(self, method, endpoint, timeout=DEFAULT_REQUEST_TIMEOUT, **kwargs):
        """Make an API request, raising for non-2xx responses."""
        url = f"{self.base_url}{endpoint}"
        response = self.session.request(method, url, timeout=timeout, **kwargs)
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise requests.exceptions.HTTPError(
                f"{e} - Response: {response.text}", response=response
            ) from e
        return response

    def _upload_request_timeout(self):
        return self.config.upload_timeout_seconds or None

    @staticmethod
    def _extract_cid(payload):
        cid = payload.get("IpfsHash") if isinstance(payload, dict) else None
        if not cid:
            raise UploadError(f"Pinata response missing CID: {payload}")
        return cid

    def _pin_file_entries(self, entries, name):
        """POST files to pinFileToIPFS and return the resulting CID.

        ``entries`` holds ``(upload_name, source)`` pairs where source is a
        local path or raw bytes. Upload names of the form ``folder/file``
        make Pinata wrap everything in one folder CID.
        """
        with ExitStack() as stack:
            files = []
            for upload_name, source in entries:
                if isinstance(source, bytes):
                    content = source
                else:
                    content = stack.enter_context(open(source, 'rb'))
                files.append(("file", (upload_name, content, _media_type(upload_name))))

            response = self._request(
                "POST",
                "/pinning/pinFileToIPFS",
                timeout=self._upload_request_timeout(),
                files=files,
                data={"pinataMetadata": json.dumps({"name": name})},
            )

        return self._extract_cid(response.json())

    def _run_with_timeout(self, func, *args):
        """Run ``func`` on a worker thread and wait at most the upload timeout.

        On timeout the worker is abandoned and its eventual result discarded.
        """
        timeout = self.config.upload_timeout_seconds
        outcome = {}
        finished = threading.Event()

        def worker():
            try:
                outcome['result'] = func(*args)
            except Exception as e:
                outcome['error'] = e
            finally:
                finished.set()

        threading.Thread(target=worker, name="pinata-upload", daemon=True).start()

        if not finished.wait(timeout):
            raise UploadTimeoutError(
                f"Upload timed out after {timeout:g} s, check the network connection or reduce the upload size")
        if 'error' in outcome:
            raise outcome['error']
        return outcome['result']

    def authenticate(self):
        """Check the JWT against Pinata. Never raises; returns False on failure."""
        try:
            self._request("GET", "/data/testAuthentication")
            self.logger.info("✅ Pinata authentication succeeded!")
            return True
        except Exception as e:
            self.logger.error(f"❌ Pinata authentication failed: {e}")
            return False

    def upload_directory(self, dir_path):
        """Upload every file under ``dir_path`` as one folder and return its CID.

        Each attempt races the upload against the configured timeout. Failed
        attempts are retried after the retry delay; once all attempts are used
        up an UploadError chained to the last failure is raised.
        """
        self.logger.info(f"📁 Uploading folder: {dir_path}")
        folder_name = os.path.basename(os.path.normpath(dir_path))
        attempts = max(1, self.config.max_retries)
        last_error = None

        for attempt in range(1, attempts + 1):
            try:
                file_paths = self.file_manager.list_files(dir_path)
                total_size = sum(self.file_manager.get_file_size(path) for path in file_paths)
                self.logger.info(f"📁 Found {len(file_paths)} files, total size: {format_size(total_size)}")

                entries = [
                    (f"{folder_name}/{os.path.relpath(path, dir_path).replace(os.sep, '/')}", path)
                    for path in file_paths
                ]

                with ProgressTracker(self.logger) as progress:
                    progress.start("🚀 Uploading to Pinata...")
                    cid = self._run_with_timeout(self._pin_file_entries, entries, folder_name)

                self.logger.info(f"✅ Folder uploaded successfully! CID: {cid}")
                return cid

            except (requests.RequestException, UploadError, OSError) as e:
                last_error = e
                self.logger.error(f"❌ Upload attempt {attempt} failed: {e}")

                if attempt < attempts:
                    self.logger.info(
                        f"⏳ Retrying in {self.config.retry_delay_seconds:g} s... ({attempt}/{attempts})")
                    time.sleep(self.config.retry_delay_seconds)

        self.logger.error(f"❌ Upload failed after {attempts} attempts")
        raise UploadError(f"Upload of {dir_path} failed after {attempts} attempts: {last_error}") from last_error

    def upload_single_file(self, file_path, name=None):
        """Upload one file with a single attempt and return its CID."""
        self.logger.info(f"📁 Uploading single file: {file_path}")
        file_name = name or os.path.basename(file_path)

        try:
            size = self.file_manager.get_file_size(file_path)
            self.logger.info(f"📁 File size: {format_size(size)}")
            started = time.monotonic()

            cid = self._pin_file_entries([(file_name, file_path)], file_name)

            duration = time.monotonic() - started
            self.logger.info(f"✅ File uploaded successfully! CID: {cid}")
            self.logger.info(f"⏱️  Upload completed in {duration:.2f} seconds")
            return cid
        except Exception as e:
            self.logger.error(f"❌ Single file upload failed: {e}")
            raise

    def upload_metadata(self, metadata, file_name):
        """Serialize a metadata object to JSON and upload it as ``file_name``."""
        self.logger.info(f"📄 Uploading metadata: {file_name}")

        try:
            content = serialize_metadata(metadata).encode('utf-8')
            cid = self._pin_file_entries([(file_name, content)], file_name)
            self.logger.info(f"✅ Metadata uploaded successfully! CID: {cid}")
            return cid
        except Exception as e:
            self.logger.error(f"❌ Metadata upload failed: {e}")
            raise

    def upload_test_file(self):
        self.logger.info("🧪 Uploading test file")

        try:
            cid = self._pin_file_entries([(TEST_FILE_NAME, TEST_FILE_CONTENT)], TEST_FILE_NAME)
            self.logger.info(f"✅ Test file uploaded successfully! CID: {cid}")
            return cid
        except Exception as e:
            self.logger.error(f"❌ Test file upload failed: {e}")
            raise

    def pin_by_cid(self, cid, name=None):
        """Ask Pinata to pin content that already exists on IPFS."""
        self.logger.info(f"📌 Pinning CID: {cid}")
        body = {"hashToPin": cid}
        if name:
            body["pinataMetadata"] = {"name": name}

        try:
            response = self._request("POST", "/pinning/pinByHash", json=body)
            result = response.json()
            self.logger.info(f"✅ CID pin request accepted! Status: {result.get('status', 'unknown')}")
            return result
        except Exception as e:
            self.logger.error(f"❌ CID pin failed: {e}")
            raise

    def check_pin_queue(self, status="prechecking"):
        self.logger.info(f"📊 Checking pin queue status ({status})")

        try:
            response = self._request("GET", "/pinning/pinJobs", params={"status": status})
            result = response.json()
            jobs = result.get("rows", [])
            self.logger.info(f"✅ Pin queue fetched! {result.get('count', len(jobs))} job(s)")
            for job in jobs:
                self.logger.info(f"   - {job.get('ipfs_pin_hash')}: {job.get('status')}")
            return result
        except Exception as e:
            self.logger.error(f"❌ Failed to fetch pin queue status: {e}")
            raise
