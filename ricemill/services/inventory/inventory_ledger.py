from datetime import date
from decimal import Decimal
import logging

from ricemill.constants.error_codes import ErrorCode
from ricemill.constants.materials import (
    BATCH_COLLECTIONS,
    USAGE_COLLECTIONS,
    RETURNED_SOURCE_TAG,
    MaterialType,
)
from ricemill.core.config import PRUNE_EXHAUSTED_GUNNY_BATCHES
from ricemill.core.exceptions import NotFoundError
from ricemill.schemas.inventory.inventory_batch_schemas import (
    ConsumeResult,
    InventoryBatch,
    InventoryBatchCreate,
    LedgerSummary,
    StockUsage,
)
from ricemill.services.storage.collection_store import CollectionStore
from ricemill.utils.decimal_utils import ZERO, parse_positive, sum_decimals
from ricemill.utils.ids import new_id

logger = logging.getLogger(__name__)


class InventoryLedger:
    """Lot-based stock of one material, consumed first-fit in stored order.

    The ledger works on a snapshot loaded from the store; nothing is written
    back until ``save()``. Every batch keeps
    ``quantity_used + quantity_remaining == quantity_received``.

    With ``prune_exhausted`` on, batches that reach zero during a consumption
    are dropped from the active set instead of being kept as history.
    """

    def __init__(
        self,
        store: CollectionStore,
        material: MaterialType,
        *,
        prune_exhausted: bool | None = None,
    ):
        self.store = store
        self.material = MaterialType(material)
        if prune_exhausted is None:
            prune_exhausted = (
                self.material == MaterialType.GUNNY and PRUNE_EXHAUSTED_GUNNY_BATCHES
            )
        self.prune_exhausted = prune_exhausted

        self.batches: list[InventoryBatch] = [
            InventoryBatch.model_validate(r)
            for r in store.load(BATCH_COLLECTIONS[self.material])
        ]
        self.usages: list[StockUsage] = [
            StockUsage.model_validate(r)
            for r in store.load(USAGE_COLLECTIONS[self.material])
        ]

    # =====================================================
    # RECEIVE
    # =====================================================
    def receive(self, payload: InventoryBatchCreate) -> InventoryBatch:
        batch = InventoryBatch(
            id=new_id(),
            material_type=self.material,
            quantity_received=payload.quantity,
            quantity_used=ZERO,
            quantity_remaining=payload.quantity,
            date_received=payload.date_received,
            source_tag=payload.source_tag,
            notes=payload.notes,
            supplier=payload.supplier,
            batch_number=payload.batch_number,
            certificate_number=payload.certificate_number,
            expiry_date=payload.expiry_date,
        )
        self.batches.append(batch)
        return batch

    # =====================================================
    # QUERIES
    # =====================================================
    def available(self) -> Decimal:
        return sum_decimals(b.quantity_remaining for b in self.batches)

    def summary(self) -> LedgerSummary:
        return LedgerSummary(
            material_type=self.material,
            batch_count=len(self.batches),
            total_received=sum_decimals(b.quantity_received for b in self.batches),
            total_used=sum_decimals(b.quantity_used for b in self.batches),
            total_remaining=self.available(),
        )

    def get_batch(self, batch_id: str) -> InventoryBatch:
        for batch in self.batches:
            if batch.id == batch_id:
                return batch
        raise NotFoundError("Inventory batch not found", ErrorCode.BATCH_NOT_FOUND)

    # =====================================================
    # CONSUME
    # =====================================================
    def plan(
        self,
        amount,
        *,
        ack_number: str | None = None,
        usage_date: date | None = None,
    ) -> ConsumeResult:
        """Work out a consumption without touching the ledger."""
        amount = parse_positive(amount, "amount")
        available = self.available()

        if available < amount:
            return ConsumeResult(
                ok=False,
                requested=amount,
                available=available,
                batches=list(self.batches),
            )

        usage_date = usage_date or date.today()
        remaining = amount
        batches: list[InventoryBatch] = []
        usages: list[StockUsage] = []

        for batch in self.batches:
            if remaining <= 0 or batch.quantity_remaining <= 0:
                batches.append(batch)
                continue

            take = min(batch.quantity_remaining, remaining)
            remaining -= take

            updated = batch.model_copy(
                update={
                    "quantity_used": batch.quantity_used + take,
                    "quantity_remaining": batch.quantity_remaining - take,
                }
            )
            usages.append(
                StockUsage(
                    id=new_id(),
                    material_type=self.material,
                    batch_id=batch.id,
                    ack_number=ack_number,
                    quantity_used=take,
                    usage_date=usage_date,
                    source_tag=batch.source_tag,
                )
            )

            if self.prune_exhausted and updated.is_exhausted:
                continue
            batches.append(updated)

        return ConsumeResult(
            ok=True,
            requested=amount,
            available=available,
            batches=batches,
            usages=usages,
        )

    def consume(
        self,
        amount,
        *,
        ack_number: str | None = None,
        usage_date: date | None = None,
    ) -> ConsumeResult:
        result = self.plan(amount, ack_number=ack_number, usage_date=usage_date)
        if not result.ok:
            logger.info(
                "Stock consumption refused",
                extra={
                    "material": self.material.value,
                    "requested": str(result.requested),
                    "available": str(result.available),
                },
            )
            return result

        self.batches = list(result.batches)
        self.usages.extend(result.usages)
        return result

    # =====================================================
    # RESTORE (inverse of consume)
    # =====================================================
    def restore(
        self,
        usages: list[StockUsage],
        *,
        returned_on: date | None = None,
    ) -> list[InventoryBatch]:
        """Credit consumed stock back to the batches it came from.

        Stock whose batch no longer exists comes back as a new batch tagged
        ``returned``. The usage records are removed from the log.
        """
        touched: list[InventoryBatch] = []
        by_id = {b.id: i for i, b in enumerate(self.batches)}

        for usage in usages:
            quantity = usage.quantity_used
            index = by_id.get(usage.batch_id)

            if index is not None:
                batch = self.batches[index]
                credit = min(quantity, batch.quantity_used)
                batch = batch.model_copy(
                    update={
                        "quantity_used": batch.quantity_used - credit,
                        "quantity_remaining": batch.quantity_remaining + credit,
                    }
                )
                self.batches[index] = batch
                touched.append(batch)
                quantity -= credit

            if quantity > 0:
                touched.append(
                    self.receive(
                        InventoryBatchCreate(
                            quantity=quantity,
                            date_received=returned_on or usage.usage_date,
                            source_tag=RETURNED_SOURCE_TAG,
                            notes=f"Returned from {usage.ack_number or 'consumption'}",
                        )
                    )
                )

        restored = {u.id for u in usages}
        self.usages = [u for u in self.usages if u.id not in restored]
        return touched

    # =====================================================
    # DELETE
    # =====================================================
    def delete_batch(self, batch_id: str) -> InventoryBatch:
        batch = self.get_batch(batch_id)
        self.batches = [b for b in self.batches if b.id != batch_id]
        # usage logs of the batch go with it
        self.usages = [u for u in self.usages if u.batch_id != batch_id]
        return batch

    def usages_for_ack(self, ack_number: str) -> list[StockUsage]:
        return [u for u in self.usages if u.ack_number == ack_number]

    # =====================================================
    # PERSIST
    # =====================================================
    def save(self) -> None:
        self.store.save(
            BATCH_COLLECTIONS[self.material],
            [b.to_document() for b in self.batches],
        )
        self.store.save(
            USAGE_COLLECTIONS[self.material],
            [u.to_document() for u in self.usages],
        )
