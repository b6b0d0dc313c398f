# tests/conftest.py
import io
import os
import tempfile
import zipfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Import-time storage (log files) goes to a scratch directory, not the working tree
os.environ.setdefault("STORAGE_PATH", tempfile.mkdtemp(prefix="smeta-tests-"))

from fastapi.testclient import TestClient

from smeta.config import Settings
from smeta.database import Database
from smeta.main import create_app
from smeta.models import Capa, CapaPillar, CapaSeverity, CapaStatus, Document, DocumentCategory, Pillar

PDF_BYTES = b"%PDF-1.4\n% test document\n"


def make_zip(entries: dict) -> bytes:
    """Build a ZIP archive in memory from {name: content}"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a throwaway storage root and database file"""
    return Settings(
        _env_file=None,
        STORAGE_PATH=tmp_path / "storage",
        DATABASE_URL=f"sqlite:///{tmp_path / 'data' / 'test.db'}",
        ENVIRONMENT="development",
    )


@pytest.fixture
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture
def client(app):
    """Test client; entering it runs the lifespan and opens the database"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session(client, app):
    """Session on the same database the running app uses"""
    session = app.state.database.session()
    yield session
    session.close()


@pytest.fixture
def database(test_settings):
    """Standalone storage handle for repository level tests"""
    database = Database(test_settings.DATABASE_URL).open()
    yield database
    database.close()


@pytest.fixture
def session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def document_factory(test_settings):
    """Insert a document row together with its file on disk"""
    counter = {"value": 0}
    base_date = datetime(2025, 1, 1, 12, 0, 0)

    def _create(
            session,
            original_filename="report.pdf",
            pillar=Pillar.PILLAR_1,
            category=DocumentCategory.POLICIES,
            filename=None,
            upload_date=None,
            content=PDF_BYTES,
            file_type="application/pdf",
            display_name=None
    ):
        counter["value"] += 1
        filename = filename or f"17000000000{counter['value']:02d}-tst{counter['value']:03d}.pdf"

        directory = test_settings.DOCUMENTS_PATH / pillar.value
        if category is not None:
            directory = directory / category.value
        directory.mkdir(parents=True, exist_ok=True)
        file_path = directory / filename
        file_path.write_bytes(content)

        document = Document(
            filename=filename,
            original_filename=original_filename,
            display_name=display_name,
            pillar=pillar,
            category=category,
            file_type=file_type,
            file_size=len(content),
            upload_date=upload_date or base_date + timedelta(minutes=counter["value"]),
            file_path=file_path.relative_to(test_settings.STORAGE_PATH).as_posix()
        )
        session.add(document)
        session.commit()
        session.refresh(document)
        return document

    return _create


@pytest.fixture
def sample_document(db_session, document_factory):
    return document_factory(db_session, original_filename="Health and Safety Policy.pdf")


@pytest.fixture
def sample_capa(db_session):
    capa = Capa(
        capa_id="CAPA-2025-001",
        description="Fire exits blocked in warehouse B",
        pillar=CapaPillar.PILLAR_2,
        severity=CapaSeverity.MAJOR,
        status=CapaStatus.OPEN,
        date_opened=datetime(2025, 3, 1, 9, 0, 0)
    )
    db_session.add(capa)
    db_session.commit()
    db_session.refresh(capa)
    return capa


@pytest.fixture
def html_package():
    return make_zip({
        "index.html": "<html><head><link rel='stylesheet' href='style.css'></head><body>KPIs</body></html>",
        "style.css": "body { color: #333; }",
        "assets/chart.js": "console.log('chart');",
    })


@pytest.fixture
def storage_files(test_settings):
    """List every file currently under a storage sub-directory"""
    def _list(path: Path):
        return [p for p in path.rglob("*") if p.is_file()]
    return _list


@pytest.fixture
def zip_factory():
    return make_zip


@pytest.fixture
def pdf_bytes():
    return PDF_BYTES
