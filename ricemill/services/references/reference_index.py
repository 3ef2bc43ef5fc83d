import logging

from ricemill.constants.collections import (
    BY_PRODUCT_PAYMENTS,
    BY_PRODUCT_SALES,
    FCI_CONSIGNMENTS,
    LORRY_FREIGHTS,
    PURCHASE_PAYMENTS,
    PURCHASES,
    RICE_PRODUCTIONS,
    SALES_PAYMENTS,
    SALES_RECORDS,
)
from ricemill.constants.materials import BATCH_COLLECTIONS, USAGE_COLLECTIONS
from ricemill.schemas.references.reference_schemas import (
    DanglingReference,
    ReferenceReport,
)
from ricemill.services.storage.collection_store import CollectionStore

logger = logging.getLogger(__name__)


class ReferenceIndex:
    """Lookup maps over the soft string references between collections."""

    def __init__(self, store: CollectionStore):
        self.store = store
        consignments = store.load(FCI_CONSIGNMENTS)
        productions = store.load(RICE_PRODUCTIONS)

        self.consignments_by_id = {c["id"]: c for c in consignments if c.get("id")}
        self.consignments_by_ack = {
            c["ackNumber"]: c for c in consignments if c.get("ackNumber")
        }
        self.productions_by_ack = {
            p["ackNumber"]: p for p in productions if p.get("ackNumber")
        }

    def consignment(self, consignment_id: str) -> dict | None:
        return self.consignments_by_id.get(consignment_id)

    def consignment_for_ack(self, ack_number: str) -> dict | None:
        return self.consignments_by_ack.get(ack_number)

    def production_for_ack(self, ack_number: str) -> dict | None:
        return self.productions_by_ack.get(ack_number)

    # =====================================================
    # DANGLING REFERENCES
    # =====================================================
    def _dangling(self, collection: str, field: str, targets: set) -> list[DanglingReference]:
        found = []
        for record in self.store.load(collection):
            value = record.get(field)
            if value and value not in targets:
                found.append(
                    DanglingReference(
                        collection=collection,
                        record_id=str(record.get("id", "")),
                        field=field,
                        value=str(value),
                    )
                )
        return found

    def report(self) -> ReferenceReport:
        dangling = self._dangling(LORRY_FREIGHTS, "consignmentId", set(self.consignments_by_id))

        purchase_ids = {p.get("id") for p in self.store.load(PURCHASES)}
        dangling += self._dangling(PURCHASE_PAYMENTS, "purchaseId", purchase_ids)

        sales_ids = {s.get("id") for s in self.store.load(SALES_RECORDS)}
        dangling += self._dangling(SALES_PAYMENTS, "salesId", sales_ids)

        by_product_sale_ids = {s.get("id") for s in self.store.load(BY_PRODUCT_SALES)}
        dangling += self._dangling(BY_PRODUCT_PAYMENTS, "saleId", by_product_sale_ids)

        for material, usage_key in USAGE_COLLECTIONS.items():
            batch_ids = {b.get("id") for b in self.store.load(BATCH_COLLECTIONS[material])}
            dangling += self._dangling(usage_key, "batchId", batch_ids)

        report = ReferenceReport(
            consignments_without_production=sorted(
                set(self.consignments_by_ack) - set(self.productions_by_ack)
            ),
            productions_without_consignment=sorted(
                set(self.productions_by_ack) - set(self.consignments_by_ack)
            ),
            dangling=dangling,
        )

        if dangling:
            logger.warning("Dangling references found", extra={"count": len(dangling)})
        return report


def reference_report(store: CollectionStore) -> ReferenceReport:
    return ReferenceIndex(store).report()
