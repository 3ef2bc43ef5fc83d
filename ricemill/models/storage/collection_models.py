from sqlalchemy import Column, Integer, String, JSON, CheckConstraint
from ricemill.core.db import Base
from ricemill.models.base.mixins import TimestampMixin


class StoredCollection(Base, TimestampMixin):
    """One named collection of records, persisted as a single JSON document."""

    __tablename__ = "collections"

    key = Column(String(64), primary_key=True)
    payload = Column(JSON, nullable=False, default=list)
    record_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("record_count >= 0", name="ck_collection_record_count_non_negative"),
    )

    def __repr__(self):
        return f"<StoredCollection key={self.key} records={self.record_count}>"
