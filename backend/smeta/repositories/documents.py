# backend/smeta/repositories/documents.py
from typing import Dict, List

from sqlalchemy import case, func, literal, or_
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models.document import Document, DocumentCategory, Pillar
from ..schemas.document import DocumentCreate, DocumentUpdate
from ..utils.logging import db_logger

SEARCH_LIMIT = 50


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class DocumentRepository:
    """Queries and mutations for uploaded document metadata"""

    def __init__(self, db: Session):
        self.db = db

    def _newest_first(self, query):
        return query.order_by(Document.upload_date.desc(), Document.id.desc())

    def create(self, data: DocumentCreate) -> Document:
        document = Document(**data.model_dump())
        self.db.add(document)
        self.db.commit()
        self.db.refresh(document)
        db_logger.debug("Inserted document", extra={
            "document_id": document.id,
            "file_path": document.file_path
        })
        return document

    def get_by_id(self, document_id: int) -> Document:
        document = self.db.query(Document).filter(Document.id == document_id).first()
        if document is None:
            raise NotFoundError("Document not found")
        return document

    def list_all(self) -> List[Document]:
        return self._newest_first(self.db.query(Document)).all()

    def list_by_pillar(self, pillar: Pillar) -> List[Document]:
        return self._newest_first(
            self.db.query(Document).filter(Document.pillar == pillar)
        ).all()

    def list_by_pillar_and_category(self, pillar: Pillar, category: DocumentCategory) -> List[Document]:
        return self._newest_first(
            self.db.query(Document).filter(
                Document.pillar == pillar,
                Document.category == category
            )
        ).all()

    def update(self, document_id: int, data: DocumentUpdate) -> Document:
        document = self.get_by_id(document_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return document

        for field, value in changes.items():
            setattr(document, field, value)
        self.db.commit()
        self.db.refresh(document)
        return document

    def delete(self, document_id: int) -> None:
        deleted = self.db.query(Document).filter(Document.id == document_id).delete(synchronize_session=False)
        if deleted == 0:
            self.db.rollback()
            raise NotFoundError("Document not found")
        self.db.commit()

    def counts(self) -> Dict[str, object]:
        """Document counts nested as pillar -> category -> n, with per-pillar and grand totals"""
        rows = self.db.query(
            Document.pillar,
            Document.category,
            func.count(Document.id)
        ).group_by(Document.pillar, Document.category).all()

        counts: Dict[str, object] = {}
        grand_total = 0
        for pillar, category, count in rows:
            pillar_counts = counts.setdefault(pillar.value, {"total": 0})
            if category is not None:
                pillar_counts[category.value] = count
            pillar_counts["total"] += count
            grand_total += count

        counts["grandTotal"] = grand_total
        return counts

    def search(self, term: str) -> List[Document]:
        """Case-insensitive substring search ranked into five relevance tiers.

        1. exact original filename, 2. original filename contains the term,
        3. stored filename contains it, 4. pillar or category contains it,
        5. anything else. Newer uploads win within a tier.
        """
        # Fold both sides with SQLite LOWER(), which only folds ASCII
        exact = func.lower(literal(term))
        pattern = func.lower(literal(_like_pattern(term)))

        original = func.lower(Document.original_filename)
        stored = func.lower(Document.filename)
        pillar = func.lower(Document.pillar)
        category = func.lower(Document.category)

        relevance = case(
            (original == exact, 1),
            (original.like(pattern, escape="\\"), 2),
            (stored.like(pattern, escape="\\"), 3),
            (or_(pillar.like(pattern, escape="\\"), category.like(pattern, escape="\\")), 4),
            else_=5
        )

        return (
            self.db.query(Document)
            .filter(or_(
                original.like(pattern, escape="\\"),
                stored.like(pattern, escape="\\"),
                pillar.like(pattern, escape="\\"),
                category.like(pattern, escape="\\")
            ))
            .order_by(relevance, Document.upload_date.desc(), Document.id.desc())
            .limit(SEARCH_LIMIT)
            .all()
        )
