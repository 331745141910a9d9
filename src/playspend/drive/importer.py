"""Import a Purchase History export from Google Drive."""
import io
from datetime import datetime
from ssl import SSLError
from typing import List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload

from .models import DriveFile
from .takeout import extract_purchase_history
from playspend.config.settings import AppSettings, get_settings
from playspend.utils.auth import get_credentials
from playspend.utils.exceptions import NetworkError
from playspend.utils.logger import get_logger
from playspend.utils.retry import retry_with_backoff

logger = get_logger()

TRANSIENT_ERRORS = (HttpError, SSLError, OSError, ConnectionError, TimeoutError)

CANDIDATE_QUERY = (
    "trashed=false and ("
    "(name contains 'Purchase History' and mimeType='application/json') "
    "or (name contains 'takeout' and "
    "(mimeType='application/zip' or mimeType='application/x-zip-compressed'))"
    ")"
)


class DriveImporter:
    """Finds and downloads Purchase History exports on Google Drive."""

    def __init__(self, settings: Optional[AppSettings] = None, service=None):
        """
        Initialize importer.

        Args:
            settings: Credentials and scopes, global settings by default
            service: Ready Drive v3 service; built from credentials if omitted
        """
        if service is None:
            settings = settings or get_settings()
            credentials = get_credentials(
                service_account_path=settings.service_account_file,
                oauth_client_secrets=settings.oauth_client_secrets,
                oauth_token_path=settings.oauth_token_file,
                scopes=settings.google_api_scopes
            )
            service = build("drive", "v3", credentials=credentials)
        self.service = service

    def list_candidates(self) -> List[DriveFile]:
        """
        List JSON exports and Takeout archives, newest first.

        Raises:
            NetworkError: If Drive cannot be reached after retries
        """
        try:
            results = self._list_files()
        except TRANSIENT_ERRORS as e:
            raise NetworkError(f"Could not list files on Google Drive: {e}") from e

        files = []
        for item in results.get("files", []):
            modified = item.get("modifiedTime")
            files.append(DriveFile(
                id=item["id"],
                name=item["name"],
                mime_type=item.get("mimeType", ""),
                modified_time=datetime.fromisoformat(modified.replace("Z", "+00:00")) if modified else None,
                size=int(item["size"]) if item.get("size") else None
            ))

        logger.info(f"Found {len(files)} candidate export files on Drive")
        return files

    def download(self, drive_file: DriveFile) -> bytes:
        """
        Download file contents into memory.

        Raises:
            NetworkError: If the download fails after retries
        """
        try:
            return self._download(drive_file)
        except TRANSIENT_ERRORS as e:
            raise NetworkError(f"Could not download {drive_file.name} from Google Drive: {e}") from e

    @retry_with_backoff(retryable_exceptions=TRANSIENT_ERRORS)
    def _list_files(self) -> dict:
        return self.service.files().list(
            q=CANDIDATE_QUERY,
            fields="files(id, name, mimeType, modifiedTime, size)",
            orderBy="modifiedTime desc",
            pageSize=100
        ).execute()

    @retry_with_backoff(retryable_exceptions=TRANSIENT_ERRORS)
    def _download(self, drive_file: DriveFile) -> bytes:
        request = self.service.files().get_media(fileId=drive_file.id)
        buffer = io.BytesIO()

        # 5MB chunks; Takeout archives can be large
        downloader = MediaIoBaseDownload(buffer, request, chunksize=5 * 1024 * 1024)
        done = False
        while not done:
            status, done = downloader.next_chunk()
            if status:
                logger.debug(f"Downloading {drive_file.name}: {int(status.progress() * 100)}%")

        logger.info(f"Downloaded {drive_file.name} ({buffer.tell()} bytes)")
        return buffer.getvalue()

    def import_purchase_history(self, drive_file: DriveFile) -> str:
        """
        Download a candidate file and return its Purchase History JSON text.

        Raises:
            ArchiveError: If the file holds no purchase history
        """
        blob = self.download(drive_file)
        return extract_purchase_history(drive_file.name, blob)
