# tests/utils/test_files.py
import io
import re

import pytest
from fastapi import UploadFile

from smeta.errors import ForbiddenError, PayloadTooLargeError
from smeta.utils.files import (
    delete_file,
    generate_unique_name,
    get_relative_path,
    move_file,
    resolve_within,
    safe_filename,
    save_upload_file,
)


@pytest.fixture
def mock_upload_file():
    def _create_upload_file(filename: str, content: bytes):
        return UploadFile(
            filename=filename,
            file=io.BytesIO(content)
        )
    return _create_upload_file


@pytest.mark.asyncio
async def test_save_upload_file(mock_upload_file, tmp_path):
    """Test saving an uploaded file"""
    test_content = b"test file content"
    upload_file = mock_upload_file("test.pdf", test_content)

    saved_path, size = await save_upload_file(upload_file, tmp_path / "temp", max_size=1024)

    assert saved_path.exists()
    assert saved_path.read_bytes() == test_content
    assert saved_path.suffix == ".pdf"
    assert size == len(test_content)


@pytest.mark.asyncio
async def test_save_upload_file_over_limit(mock_upload_file, tmp_path):
    """Test that oversize uploads are rejected and leave nothing behind"""
    upload_file = mock_upload_file("big.pdf", b"x" * 2048)
    directory = tmp_path / "temp"

    with pytest.raises(PayloadTooLargeError):
        await save_upload_file(upload_file, directory, max_size=1024)

    assert list(directory.iterdir()) == []


def test_generate_unique_name():
    name = generate_unique_name("Quarterly Report.PDF")

    assert re.fullmatch(r"\d{13}-[a-z0-9]{6}\.PDF", name)
    assert generate_unique_name() != generate_unique_name()
    assert "." not in generate_unique_name()


def test_safe_filename():
    assert safe_filename("report.pdf") == "report.pdf"
    assert safe_filename("../../etc/passwd") == "passwd"
    assert safe_filename("C:\\Users\\me\\chart.png") == "chart.png"
    assert safe_filename("..") == "upload"
    assert safe_filename(None) == "upload"


def test_move_file(tmp_path):
    source = tmp_path / "source.pdf"
    source.write_bytes(b"content")

    moved = move_file(source, tmp_path / "nested" / "dir", "renamed.pdf")

    assert not source.exists()
    assert moved == tmp_path / "nested" / "dir" / "renamed.pdf"
    assert moved.read_bytes() == b"content"


def test_delete_file(tmp_path):
    target = tmp_path / "gone.pdf"
    target.write_bytes(b"x")

    assert delete_file(target) is True
    assert not target.exists()
    assert delete_file(target) is False


def test_get_relative_path(tmp_path):
    absolute = tmp_path / "documents" / "pillar-1" / "forms" / "a.pdf"

    assert get_relative_path(absolute, tmp_path) == "documents/pillar-1/forms/a.pdf"


def test_resolve_within(tmp_path):
    assert resolve_within(tmp_path, "assets/app.js") == (tmp_path / "assets" / "app.js").resolve()

    with pytest.raises(ForbiddenError):
        resolve_within(tmp_path / "package", "../secret.txt")

    with pytest.raises(ForbiddenError):
        resolve_within(tmp_path / "package", "/etc/passwd")
