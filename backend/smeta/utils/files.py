# backend/smeta/utils/files.py
import secrets
import shutil
import string
import time
from pathlib import Path
from typing import Tuple

from fastapi import UploadFile

from ..errors import ForbiddenError, PayloadTooLargeError
from .logging import service_logger

CHUNK_SIZE = 1024 * 1024
TOKEN_ALPHABET = string.ascii_lowercase + string.digits


def generate_unique_name(original_filename: str | None = None) -> str:
    """Build `<ms timestamp>-<6 char token><ext>` so concurrent uploads never collide"""
    token = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(6))
    extension = Path(original_filename).suffix if original_filename else ""
    return f"{int(time.time() * 1000)}-{token}{extension}"


def safe_filename(filename: str | None, fallback: str = "upload") -> str:
    """Strip any client supplied directory components from a filename"""
    name = Path((filename or "").replace("\\", "/")).name
    return name if name not in ("", ".", "..") else fallback


async def save_upload_file(upload_file: UploadFile, directory: Path, max_size: int) -> Tuple[Path, int]:
    """Stream an upload into `directory` under a unique name; return the path and byte count.

    Raises PayloadTooLargeError (after removing the partial file) once more than
    `max_size` bytes have been received.
    """
    directory.mkdir(parents=True, exist_ok=True)
    file_path = directory / generate_unique_name(upload_file.filename)

    size = 0
    try:
        with file_path.open("wb") as buffer:
            while True:
                chunk = await upload_file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_size:
                    raise PayloadTooLargeError(
                        f"File size exceeds {max_size // (1024 * 1024)}MB limit"
                    )
                buffer.write(chunk)
    except BaseException:
        delete_file(file_path)
        raise

    return file_path, size


def move_file(source: Path, destination_dir: Path, filename: str | None = None) -> Path:
    """Move (rename) a file into a directory, creating the directory if needed"""
    destination_dir.mkdir(parents=True, exist_ok=True)
    destination = destination_dir / (filename or source.name)
    shutil.move(str(source), str(destination))
    return destination


def delete_file(file_path: Path) -> bool:
    """Best-effort removal; failures are logged and never raised"""
    try:
        if file_path.exists():
            file_path.unlink()
            return True
    except OSError as e:
        service_logger.error(f"Error deleting file {file_path}: {e}")
    return False


def remove_directory(directory: Path) -> bool:
    """Best-effort recursive removal; failures are logged and never raised"""
    try:
        if directory.exists():
            shutil.rmtree(directory)
            return True
    except OSError as e:
        service_logger.error(f"Error removing directory {directory}: {e}")
    return False


def get_relative_path(absolute_path: Path, base_path: Path) -> str:
    """Convert absolute path to relative path for database storage"""
    absolute_path = Path(absolute_path).absolute()
    base_path = Path(base_path).absolute()
    return absolute_path.relative_to(base_path).as_posix()


def resolve_within(base_path: Path, relative_path: str) -> Path:
    """Resolve `relative_path` under `base_path`, refusing anything that escapes it"""
    base = Path(base_path).resolve()
    candidate = (base / relative_path).resolve()
    if candidate != base and base not in candidate.parents:
        raise ForbiddenError("Forbidden")
    return candidate
