import io
import unittest
import zipfile
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest import mock

from googleapiclient.errors import HttpError

import playspend.drive.importer as importer_mod
from playspend.config.settings import get_settings
from playspend.drive.models import DriveFile
from playspend.utils.exceptions import ArchiveError, NetworkError


class FakeExec:
    def __init__(self, result):
        self.result = result

    def execute(self):
        return self.result


class FakeFiles:
    def __init__(self, listing, contents):
        self.listing = listing
        self.contents = contents
        self.list_kwargs = None

    def list(self, **kwargs):
        self.list_kwargs = kwargs
        return FakeExec({"files": self.listing})

    def get_media(self, fileId):
        # FakeDownloader reads the payload straight off the request
        return self.contents[fileId]


class FakeService:
    def __init__(self, listing=None, contents=None):
        self.files_resource = FakeFiles(listing or [], contents or {})

    def files(self):
        return self.files_resource


class FailingFiles:
    def __init__(self, error):
        self.error = error
        self.calls = 0

    def list(self, **kwargs):
        return self

    def execute(self):
        self.calls += 1
        raise self.error


class FailingService:
    def __init__(self, error):
        self.files_resource = FailingFiles(error)

    def files(self):
        return self.files_resource


class FakeDownloader:
    def __init__(self, fh, request, chunksize=None):
        self.fh = fh
        self.request = request
        self._done = False

    def next_chunk(self):
        if not self._done:
            self.fh.write(self.request)
            self._done = True
        return None, True


def _takeout_zip():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("Takeout/Google Play Store/Purchase History.json", "[]")
    return buffer.getvalue()


class TestDriveImporter(unittest.TestCase):
    def setUp(self):
        self.original_downloader = importer_mod.MediaIoBaseDownload
        importer_mod.MediaIoBaseDownload = FakeDownloader

        self.service = FakeService(
            listing=[
                {
                    "id": "zip1",
                    "name": "takeout-20230401.zip",
                    "mimeType": "application/zip",
                    "modifiedTime": "2023-04-01T10:00:00.000Z",
                    "size": "2048",
                },
                {"id": "json1", "name": "Purchase History.json", "mimeType": "application/json"},
            ],
            contents={"zip1": _takeout_zip(), "json1": b"[1]", "bad": b"hello"},
        )
        self.importer = importer_mod.DriveImporter(service=self.service)

    def tearDown(self):
        importer_mod.MediaIoBaseDownload = self.original_downloader

    def test_list_candidates(self):
        files = self.importer.list_candidates()

        self.assertEqual([f.id for f in files], ["zip1", "json1"])
        self.assertEqual(files[0].modified_time, datetime(2023, 4, 1, 10, 0, tzinfo=timezone.utc))
        self.assertEqual(files[0].size, 2048)
        self.assertIsNone(files[1].modified_time)
        self.assertIsNone(files[1].size)
        self.assertEqual(self.service.files_resource.list_kwargs["orderBy"], "modifiedTime desc")

    def test_download_returns_contents(self):
        blob = self.importer.download(DriveFile(id="json1", name="Purchase History.json", mime_type="application/json"))

        self.assertEqual(blob, b"[1]")

    def test_import_from_takeout_zip(self):
        drive_file = DriveFile(id="zip1", name="takeout-20230401.zip", mime_type="application/zip")

        self.assertEqual(self.importer.import_purchase_history(drive_file), "[]")

    def test_import_rejects_other_files(self):
        drive_file = DriveFile(id="bad", name="notes.txt", mime_type="text/plain")

        with self.assertRaises(ArchiveError):
            self.importer.import_purchase_history(drive_file)


class TestDriveImporterFailures(unittest.TestCase):
    def test_transient_errors_retried_then_reported(self):
        service = FailingService(ConnectionError("connection reset"))
        importer = importer_mod.DriveImporter(service=service)

        with mock.patch("playspend.utils.retry.time.sleep") as sleep:
            with self.assertRaises(NetworkError):
                importer.list_candidates()

        self.assertEqual(service.files_resource.calls, get_settings().retry_max_retries)
        self.assertEqual(sleep.call_count, get_settings().retry_max_retries - 1)

    def test_client_error_not_retried(self):
        error = HttpError(SimpleNamespace(status=404, reason="Not Found"), b"File not found")
        service = FailingService(error)
        importer = importer_mod.DriveImporter(service=service)

        with mock.patch("playspend.utils.retry.time.sleep") as sleep:
            with self.assertRaises(NetworkError):
                importer.list_candidates()

        self.assertEqual(service.files_resource.calls, 1)
        sleep.assert_not_called()


if __name__ == "__main__":
    unittest.main()
