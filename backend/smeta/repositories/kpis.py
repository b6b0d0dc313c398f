# backend/smeta/repositories/kpis.py
from typing import List

from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..models.kpi_item import KpiCategory, KpiItem
from ..schemas.kpi import KpiItemCreate


class KpiRepository:
    def __init__(self, db: Session):
        self.db = db

    def _newest_first(self, query):
        return query.order_by(KpiItem.upload_date.desc(), KpiItem.id.desc())

    def list_all(self) -> List[KpiItem]:
        return self._newest_first(self.db.query(KpiItem)).all()

    def list_by_category(self, category: KpiCategory) -> List[KpiItem]:
        return self._newest_first(
            self.db.query(KpiItem).filter(KpiItem.category == category)
        ).all()

    def get_by_id(self, item_id: int) -> KpiItem:
        item = self.db.query(KpiItem).filter(KpiItem.id == item_id).first()
        if item is None:
            raise NotFoundError("KPI item not found")
        return item

    def create(self, data: KpiItemCreate) -> KpiItem:
        item = KpiItem(**data.model_dump())
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete(self, item_id: int) -> None:
        deleted = self.db.query(KpiItem).filter(KpiItem.id == item_id).delete(synchronize_session=False)
        if deleted == 0:
            self.db.rollback()
            raise NotFoundError("KPI item not found")
        self.db.commit()
