from datetime import date
from decimal import Decimal

import pytest

from conftest import receive, stock_for_consignments

from ricemill.constants.collections import (
    FCI_CONSIGNMENTS,
    GUNNY_STOCKS,
    LORRY_FREIGHTS,
    REXIN_STICKERS,
)
from ricemill.constants.error_codes import ErrorCode
from ricemill.constants.materials import MaterialType
from ricemill.core.exceptions import (
    AppException,
    DuplicateAckError,
    InsufficientStockError,
    InvalidNumericInputError,
    NotFoundError,
)
from ricemill.models.enums.consignment_status import ConsignmentStatus
from ricemill.schemas.fci.consignment_schemas import ConsignmentCreate, ConsignmentUpdate
from ricemill.schemas.ledger.freight_schemas import LorryFreightCreate
from ricemill.services.fci import consignment_service
from ricemill.services.fci.consignment_service import (
    consignment_summary,
    create_consignment,
    delete_consignment,
    get_consignment,
    list_consignments,
    stock_availability,
    update_consignment,
)
from ricemill.services.inventory.inventory_service import available_stock, list_usage
from ricemill.services.ledger.freight_service import create_freight, list_freights


def new_consignment(ack="ACK-001", on=date(2025, 2, 1), **extra):
    return ConsignmentCreate(ack_number=ack, consignment_date=on, **extra)


# -------------------------
# CREATE
# -------------------------
def test_consignment_consumes_gunny_and_stickers(store):
    stock_for_consignments(store, gunny=1000, stickers=1000)

    consignment = create_consignment(store, new_consignment(lorry_number="TS09AB1234"))

    assert consignment.status == ConsignmentStatus.in_transit
    assert consignment.total_bags == 580
    assert consignment.stickers_used == 580
    assert consignment.rice_quantity == 290
    assert consignment.frk_quantity == 290
    assert available_stock(store, MaterialType.GUNNY) == 420
    assert available_stock(store, MaterialType.STICKER) == 420

    usages = list_usage(store, MaterialType.GUNNY, ack_number="ACK-001")
    assert sum(u.quantity_used for u in usages) == 580
    assert all(u.usage_date == date(2025, 2, 1) for u in usages)


def test_consignment_spans_gunny_batches(store):
    receive(store, "gunny", 500)
    receive(store, "gunny", 500)
    receive(store, "sticker", 580)

    create_consignment(store, new_consignment())

    usages = list_usage(store, MaterialType.GUNNY, ack_number="ACK-001")
    assert [u.quantity_used for u in usages] == [500, 80]
    assert available_stock(store, MaterialType.STICKER) == 0


def test_one_bag_short_refuses_and_changes_nothing(store):
    stock_for_consignments(store, gunny=579, stickers=600)
    gunny_before = store.load(GUNNY_STOCKS)

    with pytest.raises(InsufficientStockError) as exc:
        create_consignment(store, new_consignment())

    assert exc.value.required("gunny") == 580
    assert exc.value.available("gunny") == 579
    assert exc.value.available("stickers") == 600
    assert exc.value.details["gunny"] == {"required": "580", "available": "579"}

    assert store.load(GUNNY_STOCKS) == gunny_before
    assert available_stock(store, MaterialType.STICKER) == 600
    assert store.load(FCI_CONSIGNMENTS) == []
    assert list_usage(store, MaterialType.STICKER) == []


def test_sticker_shortage_also_refuses(store):
    stock_for_consignments(store, gunny=600, stickers=100)

    with pytest.raises(InsufficientStockError) as exc:
        create_consignment(store, new_consignment())

    assert "stickers" in exc.value.message
    assert available_stock(store, MaterialType.GUNNY) == 600


def test_duplicate_ack_is_rejected(store):
    stock_for_consignments(store, gunny=1200, stickers=1200)
    create_consignment(store, new_consignment("ACK-7"))

    with pytest.raises(DuplicateAckError):
        create_consignment(store, new_consignment(" ACK-7 "))

    assert available_stock(store, MaterialType.GUNNY) == 620
    assert len(list_consignments(store)) == 1


def test_blank_ack_is_rejected(store):
    stock_for_consignments(store)

    with pytest.raises(AppException) as exc:
        create_consignment(store, new_consignment("   "))

    assert exc.value.error_code == ErrorCode.ACK_REQUIRED
    assert available_stock(store, MaterialType.GUNNY) == 580


def test_stock_availability_reports_both_materials(store):
    stock_for_consignments(store, gunny=600, stickers=500)

    checks = stock_availability(store)

    assert checks["gunny"].sufficient
    assert not checks["stickers"].sufficient


# -------------------------
# UPDATE
# -------------------------
def test_update_sets_fci_fields_and_status(store):
    stock_for_consignments(store)
    consignment = create_consignment(store, new_consignment())

    updated = update_consignment(
        store,
        consignment.id,
        ConsignmentUpdate(fci_weight="289.6", status=ConsignmentStatus.qc_passed),
    )

    assert updated.fci_weight == Decimal("289.6")
    assert get_consignment(store, consignment.id).status == ConsignmentStatus.qc_passed


def test_update_rejects_bad_fci_weight():
    with pytest.raises(InvalidNumericInputError) as exc:
        ConsignmentUpdate(fci_weight="heavy")

    assert exc.value.field == "fci_weight"


def test_update_ack_keeps_uniqueness_and_retags_usage(store):
    stock_for_consignments(store, gunny=1160, stickers=1160)
    first = create_consignment(store, new_consignment("ACK-1"))
    create_consignment(store, new_consignment("ACK-2"))

    with pytest.raises(DuplicateAckError):
        update_consignment(store, first.id, ConsignmentUpdate(ack_number="ACK-2"))

    update_consignment(store, first.id, ConsignmentUpdate(ack_number="ACK-9"))

    assert list_usage(store, MaterialType.GUNNY, ack_number="ACK-1") == []
    assert len(list_usage(store, MaterialType.STICKER, ack_number="ACK-9")) == 1


# -------------------------
# DELETE
# -------------------------
def test_delete_restores_stock_and_drops_freight(store):
    receive(store, "gunny", 500)
    receive(store, "gunny", 500)
    receive(store, "sticker", 700)
    consignment = create_consignment(store, new_consignment())
    create_freight(
        store,
        LorryFreightCreate(
            consignment_id=consignment.id,
            transporter_name="Sri Balaji",
            freight_per_mt=1500,
        ),
    )
    create_freight(
        store,
        LorryFreightCreate(
            consignment_id="other",
            transporter_name="Sri Balaji",
            freight_per_mt=1500,
        ),
    )

    delete_consignment(store, consignment.id)

    assert available_stock(store, MaterialType.GUNNY) == 1000
    assert available_stock(store, MaterialType.STICKER) == 700
    assert list_usage(store, MaterialType.GUNNY) == []
    assert [f.consignment_id for f in list_freights(store)] == ["other"]
    assert len(store.load(LORRY_FREIGHTS)) == 1
    with pytest.raises(NotFoundError):
        get_consignment(store, consignment.id)


def test_delete_unknown_consignment(store):
    with pytest.raises(NotFoundError):
        delete_consignment(store, "nope")


# -------------------------
# SUMMARY / END TO END
# -------------------------
def test_summary_counts_by_status(store):
    stock_for_consignments(store, gunny=1740, stickers=1740)
    ids = [create_consignment(store, new_consignment(f"ACK-{i}")).id for i in range(3)]
    update_consignment(store, ids[0], ConsignmentUpdate(status=ConsignmentStatus.dispatched))

    summary = consignment_summary(store)

    assert summary.total == 3
    assert summary.by_status["dispatched"] == 1
    assert summary.by_status["in-transit"] == 2
    assert summary.rice_dispatched == 290
    assert summary.bags_used == 1740


def test_two_consignments_then_refusal(store):
    stock_for_consignments(store, gunny=1200, stickers=1200)

    create_consignment(store, new_consignment("ACK-A"))
    create_consignment(store, new_consignment("ACK-B"))

    with pytest.raises(InsufficientStockError) as exc:
        create_consignment(store, new_consignment("ACK-C"))

    assert exc.value.available("gunny") == 40
    assert exc.value.available("stickers") == 40
    assert len(list_consignments(store)) == 2


def test_two_gunny_batches_and_one_sticker_batch(store):
    receive(store, "gunny", 500)
    receive(store, "gunny", 200)
    receive(store, "sticker", 600)

    consignment = create_consignment(store, new_consignment())

    assert consignment.total_bags == 580
    assert consignment.stickers_used == 580
    assert consignment.status == ConsignmentStatus.in_transit

    gunny = store.load(GUNNY_STOCKS)
    assert gunny[-1]["quantityRemaining"] == 120
    assert available_stock(store, MaterialType.GUNNY) == 120

    (sticker,) = store.load(REXIN_STICKERS)
    assert sticker["quantityUsed"] == 580
    assert sticker["quantityRemaining"] == 20


def test_failed_save_leaves_ledgers_untouched(store, monkeypatch):
    stock_for_consignments(store, gunny=600, stickers=600)

    def fail(*args):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(consignment_service, "_save_consignments", fail)

    with pytest.raises(RuntimeError):
        create_consignment(store, new_consignment())

    assert available_stock(store, MaterialType.GUNNY) == 600
    assert available_stock(store, MaterialType.STICKER) == 600
    assert list_usage(store, MaterialType.GUNNY) == []
