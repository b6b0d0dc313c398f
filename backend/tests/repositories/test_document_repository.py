# tests/repositories/test_document_repository.py
import pytest
from sqlalchemy.exc import IntegrityError

from smeta.errors import NotFoundError
from smeta.models import Document, DocumentCategory, Pillar
from smeta.repositories import DocumentRepository
from smeta.repositories.documents import SEARCH_LIMIT
from smeta.schemas.document import DocumentUpdate


@pytest.fixture
def repository(session):
    return DocumentRepository(session)


def test_get_missing_document(repository):
    with pytest.raises(NotFoundError):
        repository.get_by_id(42)


def test_counts_per_pillar_and_category(repository, session, document_factory):
    document_factory(session, pillar=Pillar.PILLAR_4, category=DocumentCategory.EVIDENCE)
    document_factory(session, pillar=Pillar.PILLAR_4, category=DocumentCategory.PROCEDURES)
    document_factory(session, pillar=Pillar.PILLAR_4, category=DocumentCategory.PROCEDURES)
    document_factory(session, pillar=Pillar.CAPA, category=None)

    counts = repository.counts()

    assert counts["pillar-4"] == {"evidence": 1, "procedures": 2, "total": 3}
    assert counts["capa"] == {"total": 1}
    assert counts["grandTotal"] == 4
    assert "pillar-1" not in counts


def test_search_treats_wildcards_literally(repository, session, document_factory):
    literal = document_factory(session, original_filename="100%_done.pdf")
    document_factory(session, original_filename="100abdone.pdf")

    results = repository.search("0%_")

    assert [d.id for d in results] == [literal.id]


def test_search_is_case_insensitive(repository, session, document_factory):
    document = document_factory(session, original_filename="Fire-Safety-Audit.PDF")

    assert [d.id for d in repository.search("safety-audit")] == [document.id]


def test_search_result_limit(repository, session, document_factory):
    for index in range(SEARCH_LIMIT + 5):
        document_factory(session, original_filename=f"batch-{index}.pdf", filename=f"stored-{index}.pdf")

    assert len(repository.search("batch")) == SEARCH_LIMIT


def test_update_without_fields_returns_unchanged(repository, session, document_factory):
    document = document_factory(session, display_name="Original")

    updated = repository.update(document.id, DocumentUpdate())

    assert updated.display_name == "Original"


def test_second_delete_from_another_session_not_found(repository, session, database, document_factory):
    document = document_factory(session)
    other_session = database.session()
    try:
        other = DocumentRepository(other_session)
        other.get_by_id(document.id)
        repository.get_by_id(document.id)

        repository.delete(document.id)

        with pytest.raises(NotFoundError):
            other.delete(document.id)
    finally:
        other_session.close()

    assert session.query(Document).count() == 0


def test_delete_missing_document(repository):
    with pytest.raises(NotFoundError):
        repository.delete(42)


def test_search_non_ascii_names(repository, session, document_factory):
    greek = document_factory(session, original_filename="Έκθεση.pdf")
    german = document_factory(session, original_filename="Ärger.pdf")
    document_factory(session, original_filename="Ärger-Protokoll.pdf")

    assert [d.id for d in repository.search("Έκθεση")] == [greek.id]
    assert repository.search("Ärger.pdf")[0].id == german.id


def test_file_size_must_be_positive(session):
    session.add(Document(
        filename="empty.pdf",
        original_filename="empty.pdf",
        pillar=Pillar.PILLAR_1,
        category=DocumentCategory.FORMS,
        file_type="application/pdf",
        file_size=0,
        file_path="documents/pillar-1/forms/empty.pdf"
    ))

    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_category_required_for_numbered_pillars(session):
    session.add(Document(
        filename="loose.pdf",
        original_filename="loose.pdf",
        pillar=Pillar.PILLAR_2,
        category=None,
        file_type="application/pdf",
        file_size=10,
        file_path="documents/pillar-2/loose.pdf"
    ))

    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()


def test_file_path_is_unique(session, document_factory):
    document = document_factory(session)
    session.add(Document(
        filename="copy.pdf",
        original_filename="copy.pdf",
        pillar=Pillar.PILLAR_1,
        category=DocumentCategory.POLICIES,
        file_type="application/pdf",
        file_size=10,
        file_path=document.file_path
    ))

    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()
