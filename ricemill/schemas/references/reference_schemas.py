from typing import List

from pydantic import Field

from ricemill.schemas.base.types import RecordModel


class DanglingReference(RecordModel):
    collection: str
    record_id: str
    field: str
    value: str


class ReferenceReport(RecordModel):
    consignments_without_production: List[str] = Field(default_factory=list)
    productions_without_consignment: List[str] = Field(default_factory=list)
    dangling: List[DanglingReference] = Field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.dangling
