"""Data models for Drive operations."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class DriveFile:
    """Candidate export file on Google Drive."""
    id: str  # Drive file ID
    name: str
    mime_type: str
    modified_time: Optional[datetime] = None
    size: Optional[int] = None
