"""Locate Purchase History.json in a Google Takeout export."""
import io
import zipfile

from playspend.utils.exceptions import ArchiveError
from playspend.utils.logger import get_logger

logger = get_logger()

PURCHASE_HISTORY_NAME = "purchase history.json"

# Where Takeout puts the file, most specific last
KNOWN_PATHS = [
    "Purchase History.json",
    "Takeout/Google Play Store/Purchase History.json",
    "Google Play Store/Purchase History.json",
]

# Takeout splits exports; this one only has the index page
BROWSER_ONLY_MARKER = "archive_browser.html"


def extract_purchase_history(file_name: str, blob: bytes) -> str:
    """
    Get the Purchase History JSON text from an exported file.

    Args:
        file_name: Name of the file, used to tell JSON from ZIP
        blob: Raw file contents

    Returns:
        The decoded JSON text

    Raises:
        ArchiveError: If the file is neither JSON nor ZIP, or the ZIP has no purchase history
    """
    lowered = file_name.lower()

    if lowered.endswith(".json"):
        return _decode(blob, file_name)

    if lowered.endswith(".zip"):
        return _extract_from_zip(blob, file_name)

    raise ArchiveError("Please select either a JSON file or a ZIP file.")


def _extract_from_zip(blob: bytes, file_name: str) -> str:
    try:
        archive = zipfile.ZipFile(io.BytesIO(blob))
    except zipfile.BadZipFile as e:
        raise ArchiveError(f"Failed to extract Purchase History.json from ZIP file: {e}")

    with archive:
        names = archive.namelist()
        member = _find_member(names)

        if member is None:
            if BROWSER_ONLY_MARKER in names:
                raise ArchiveError(
                    f"Your selected ZIP file appears to contain `{BROWSER_ONLY_MARKER}`. "
                    "Please select the other ZIP file with a similar name that contains "
                    "your Purchase History."
                )
            raise ArchiveError("Could not find Purchase History.json in the ZIP file.")

        logger.info(f"Found {member} in {file_name}")
        return _decode(archive.read(member), member)


def _find_member(names: list):
    for path in KNOWN_PATHS:
        if path in names:
            return path

    for name in names:
        if name.lower().endswith(PURCHASE_HISTORY_NAME):
            return name
    return None


def _decode(blob: bytes, file_name: str) -> str:
    try:
        # Takeout files may start with a BOM
        return blob.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ArchiveError(f"{file_name} is not UTF-8 text: {e}")
