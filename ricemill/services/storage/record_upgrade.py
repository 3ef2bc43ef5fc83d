"""Bring backup records into the shape the services load.

Backups written by the older browser build store stock batches as
``{quantity, usedQuantity, remainingQuantity}``, keep payroll money as
strings and carry no derived electricity figures. Every record is
upgraded here and then validated through its model, so a restored
collection always loads.
"""
from ricemill.constants import collections as c
from ricemill.constants.materials import BATCH_COLLECTIONS, USAGE_COLLECTIONS
from ricemill.core.exceptions import AppException, InvalidBackupError
from ricemill.schemas.electricity.electricity_schemas import (
    ElectricityBill,
    ElectricityBillCreate,
)
from ricemill.schemas.fci.consignment_schemas import Consignment
from ricemill.schemas.inventory.inventory_batch_schemas import InventoryBatch, StockUsage
from ricemill.schemas.ledger.freight_schemas import LorryFreight
from ricemill.schemas.ledger.reconciliation_schemas import ReconciliationRecord
from ricemill.schemas.ledger.trade_schemas import (
    Purchase,
    PurchasePayment,
    SalesPayment,
    SalesRecord,
)
from ricemill.schemas.payroll.payroll_schemas import (
    HamaliPayment,
    HamaliWork,
    LabourWage,
    SupervisorSalary,
)
from ricemill.schemas.production.by_product_schemas import (
    ByProductPayment,
    ByProductProduction,
    ByProductSale,
)
from ricemill.schemas.production.production_schemas import PaddyRecord, RiceProduction
from ricemill.services.electricity.electricity_service import build_bill
from ricemill.utils.decimal_utils import parse_decimal, parse_non_negative

# collections kept as free-form records
PASSTHROUGH_COLLECTIONS = {
    c.BY_PRODUCTS,
    c.CUSTOMERS,
    c.PRODUCTS,
    c.SALES,
    c.PAYMENTS,
    c.EXPENSES,
    c.GUNNY_DISPATCHES,
    c.VENDORS,
}


# =====================================================
# LEGACY SHAPES
# =====================================================
def _batch(material):
    def upgrade(record: dict) -> dict:
        record = {"materialType": material.value, **record}
        if "quantityReceived" not in record:
            received = parse_non_negative(record.get("quantity"), "quantity")
            used = parse_non_negative(record.get("usedQuantity") or 0, "usedQuantity")
            remaining = record.get("remainingQuantity")
            record["quantityReceived"] = received
            record["quantityUsed"] = used
            record["quantityRemaining"] = (
                received - used if remaining is None else remaining
            )
        record.setdefault("sourceTag", record.get("source"))
        return record

    return upgrade


def _usage(material):
    def upgrade(record: dict) -> dict:
        return {"materialType": material.value, **record}

    return upgrade


def _supervisor_salary(record: dict) -> dict:
    if record.get("balanceAmount") is None:
        salary = parse_decimal(record.get("monthlySalary"), "monthlySalary")
        paid = parse_decimal(record.get("paidAmount") or 0, "paidAmount")
        record = {**record, "balanceAmount": salary - paid}
    return record


def _paddy_record(record: dict) -> dict:
    record = dict(record)
    if not record.get("id") and record.get("sNo") is not None:
        record["id"] = str(record["sNo"])
    for key in ("wSlipNo", "truckchitNo"):
        if record.get(key) is not None:
            record[key] = str(record[key])
    if record.get("totalBags") is None:
        record["totalBags"] = int(record.get("newBags") or 0) + int(record.get("oldBags") or 0)
    return record


def _electricity_bill(record: dict) -> ElectricityBill:
    # derived figures are recomputed from the readings, never trusted
    adjustment = record.get("manualAdjustment", record.get("additionalCharges")) or 0
    payload = ElectricityBillCreate.model_validate({**record, "manualAdjustment": adjustment})
    status = {k: record[k] for k in ("paymentStatus", "paymentDate") if record.get(k)}
    bill = build_bill(record.get("id"), payload)
    return ElectricityBill.model_validate({**bill.to_document(), **status})


# key -> (model, legacy upgrade)
RECORD_MODELS = {
    c.FCI_CONSIGNMENTS: (Consignment, None),
    c.LORRY_FREIGHTS: (LorryFreight, None),
    c.RECONCILIATIONS: (ReconciliationRecord, None),
    c.PURCHASES: (Purchase, None),
    c.PURCHASE_PAYMENTS: (PurchasePayment, None),
    c.SALES_RECORDS: (SalesRecord, None),
    c.SALES_PAYMENTS: (SalesPayment, None),
    c.HAMALI_WORK: (HamaliWork, None),
    c.HAMALI_PAYMENTS: (HamaliPayment, None),
    c.LABOUR_WAGES: (LabourWage, None),
    c.SUPERVISOR_SALARIES: (SupervisorSalary, _supervisor_salary),
    c.PADDY_RECORDS: (PaddyRecord, _paddy_record),
    c.RICE_PRODUCTIONS: (RiceProduction, None),
    c.BY_PRODUCT_PRODUCTIONS: (ByProductProduction, None),
    c.BY_PRODUCT_SALES: (ByProductSale, None),
    c.BY_PRODUCT_PAYMENTS: (ByProductPayment, None),
}
for _material, _key in BATCH_COLLECTIONS.items():
    RECORD_MODELS[_key] = (InventoryBatch, _batch(_material))
for _material, _key in USAGE_COLLECTIONS.items():
    RECORD_MODELS[_key] = (StockUsage, _usage(_material))


# =====================================================
# UPGRADE
# =====================================================
def _check_batch(batch: InventoryBatch) -> None:
    if batch.quantity_used + batch.quantity_remaining != batch.quantity_received:
        raise ValueError("quantityUsed + quantityRemaining must equal quantityReceived")


def upgrade_record(key: str, record: dict) -> dict:
    """Return the stored form of one backup record; raises on bad data."""
    if key in PASSTHROUGH_COLLECTIONS:
        return record

    if key == c.ELECTRICITY_BILLS:
        return _electricity_bill(record).to_document()

    model, upgrade = RECORD_MODELS[key]
    if upgrade is not None:
        record = upgrade(record)

    validated = model.model_validate(record)
    if isinstance(validated, InventoryBatch):
        _check_batch(validated)
    return validated.to_document()


def upgrade_collection(key: str, records: list[dict]) -> list[dict]:
    upgraded = []
    for index, record in enumerate(records):
        try:
            upgraded.append(upgrade_record(key, record))
        except (AppException, ValueError, TypeError) as exc:
            # pydantic ValidationError is a ValueError
            raise InvalidBackupError(
                f"Invalid record {index} in {key}",
                {"collection": key, "index": index, "error": str(exc)},
            ) from exc
    return upgraded
