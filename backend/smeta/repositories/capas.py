# backend/smeta/repositories/capas.py
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import ConflictError, NotFoundError
from ..models.capa import Capa, CapaStatus
from ..models.columns import utcnow
from ..schemas.capa import CapaCreate, CapaUpdate
from ..utils.logging import db_logger


class CapaRepository:
    """Queries and mutations for corrective/preventive actions"""

    def __init__(self, db: Session):
        self.db = db

    def _ordered(self, query):
        return query.order_by(Capa.date_opened.desc(), Capa.id.desc())

    def list_all(self) -> List[Capa]:
        return self._ordered(self.db.query(Capa)).all()

    def list_by_status(self, status: CapaStatus) -> List[Capa]:
        return self._ordered(self.db.query(Capa).filter(Capa.status == status)).all()

    def get_by_id(self, capa_pk: int) -> Capa:
        capa = self.db.query(Capa).filter(Capa.id == capa_pk).first()
        if capa is None:
            raise NotFoundError("CAPA not found")
        return capa

    def exists_by_capa_id(self, capa_id: str, exclude_id: Optional[int] = None) -> bool:
        query = self.db.query(Capa.id).filter(Capa.capa_id == capa_id)
        if exclude_id is not None:
            query = query.filter(Capa.id != exclude_id)
        return query.first() is not None

    def _ensure_unique(self, capa_id: str, exclude_id: Optional[int] = None) -> None:
        if self.exists_by_capa_id(capa_id, exclude_id):
            raise ConflictError(f'CAPA ID "{capa_id}" already exists')

    def _commit(self, capa_id: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            # A concurrent writer took the same business key after our check
            self.db.rollback()
            if "capa_id" in str(e.orig):
                raise ConflictError(f'CAPA ID "{capa_id}" already exists') from e
            raise

    def create(self, data: CapaCreate) -> Capa:
        self._ensure_unique(data.capa_id)

        values = data.model_dump()
        if values["date_opened"] is None:
            values["date_opened"] = utcnow()
        if values["status"] == CapaStatus.CLOSED and values["date_closed"] is None:
            values["date_closed"] = utcnow()

        capa = Capa(**values)
        self.db.add(capa)
        self._commit(data.capa_id)
        self.db.refresh(capa)
        db_logger.debug("Inserted CAPA", extra={"capa_pk": capa.id, "capa_id": capa.capa_id})
        return capa

    def update(self, capa_pk: int, data: CapaUpdate) -> Capa:
        """Apply only the fields present in `data`; entering closed stamps date_closed"""
        capa = self.get_by_id(capa_pk)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return capa

        if "capa_id" in changes:
            self._ensure_unique(changes["capa_id"], exclude_id=capa_pk)

        entering_closed = (
            changes.get("status") == CapaStatus.CLOSED
            and capa.status != CapaStatus.CLOSED
        )
        if entering_closed and "date_closed" not in changes:
            changes["date_closed"] = utcnow()

        for field, value in changes.items():
            setattr(capa, field, value)

        self._commit(changes.get("capa_id", capa.capa_id))
        self.db.refresh(capa)
        return capa

    def delete(self, capa_pk: int) -> None:
        deleted = self.db.query(Capa).filter(Capa.id == capa_pk).delete(synchronize_session=False)
        if deleted == 0:
            self.db.rollback()
            raise NotFoundError("CAPA not found")
        self.db.commit()
