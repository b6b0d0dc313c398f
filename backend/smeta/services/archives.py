# backend/smeta/services/archives.py
import zipfile
from pathlib import Path, PurePosixPath

from ..errors import ValidationError
from ..utils.logging import service_logger

INDEX_FILE = "index.html"


def _check_member(name: str) -> None:
    normalized = PurePosixPath(name.replace("\\", "/"))
    parts = normalized.parts
    # Absolute paths, parent references and Windows drive prefixes ("C:")
    if normalized.is_absolute() or ".." in parts or (parts and ":" in parts[0]):
        raise ValidationError(f"Archive entry escapes the package folder: {name}")


def extract_html_package(archive_path: Path, destination: Path) -> int:
    """Extract a ZIP HTML package into `destination` and return the number of entries.

    The caller owns `destination` and must remove it when this raises.
    """
    if not zipfile.is_zipfile(archive_path):
        raise ValidationError("HTML package must be a ZIP archive")

    try:
        with zipfile.ZipFile(archive_path) as archive:
            members = archive.infolist()
            for member in members:
                _check_member(member.filename)
            archive.extractall(destination)
    except zipfile.BadZipFile as e:
        raise ValidationError("HTML package is not a valid ZIP archive") from e

    if not (destination / INDEX_FILE).is_file():
        raise ValidationError(f"HTML package must contain {INDEX_FILE}")

    service_logger.info("Extracted HTML package", extra={
        "archive": archive_path.name,
        "destination": str(destination),
        "entry_count": len(members)
    })
    return len(members)
