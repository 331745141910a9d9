"""Google Drive and Takeout import module."""
from .models import DriveFile
from .takeout import extract_purchase_history
from .importer import DriveImporter

__all__ = ["DriveFile", "extract_purchase_history", "DriveImporter"]
