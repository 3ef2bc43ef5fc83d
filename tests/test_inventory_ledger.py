from datetime import date
from decimal import Decimal

import pytest

from conftest import receive

from ricemill.constants.collections import GUNNY_STOCKS, GUNNY_USAGE, REXIN_STICKERS
from ricemill.constants.materials import RETURNED_SOURCE_TAG, MaterialType
from ricemill.core.exceptions import InvalidNumericInputError, NotFoundError
from ricemill.services.inventory.inventory_ledger import InventoryLedger
from ricemill.services.inventory.inventory_service import (
    available_stock,
    consume_stock,
    delete_batch,
    ledger_summary,
    list_batches,
    list_usage,
)


def assert_conserved(batches):
    for batch in batches:
        assert batch.quantity_used + batch.quantity_remaining == batch.quantity_received
        assert batch.quantity_remaining >= 0


# -------------------------
# RECEIVE / AVAILABLE
# -------------------------
def test_receive_appends_separate_batches(store):
    receive(store, "gunny", 300)
    receive(store, "gunny", 300)

    batches = list_batches(store, MaterialType.GUNNY)
    assert len(batches) == 2
    assert all(b.quantity_used == 0 for b in batches)
    assert available_stock(store, MaterialType.GUNNY) == Decimal("600")


def test_available_is_zero_for_empty_ledger(store):
    assert available_stock(store, MaterialType.STICKER) == 0


@pytest.mark.parametrize("quantity", ["", "abc", 0, -5, "NaN", "Infinity", None])
def test_receive_rejects_bad_quantities(store, quantity):
    with pytest.raises(InvalidNumericInputError):
        receive(store, "gunny", quantity)
    assert store.load(GUNNY_STOCKS) == []


def test_frk_batches_keep_certificate_details(store):
    batch = receive(
        store,
        "frk",
        "25.5",
        supplier="Kernel Co",
        batch_number="FRK-7",
        certificate_number="CERT-1",
        expiry_date=date(2026, 1, 1),
    )
    stored = list_batches(store, MaterialType.FRK)[0]
    assert stored.id == batch.id
    assert stored.certificate_number == "CERT-1"
    assert stored.quantity_remaining == Decimal("25.5")


# -------------------------
# CONSUME
# -------------------------
def test_consume_is_first_fit_in_stored_order(store):
    first = receive(store, "sticker", 300)
    second = receive(store, "sticker", 400)

    result = consume_stock(store, MaterialType.STICKER, 350, ack_number="ACK-1")

    assert result.ok
    batches = {b.id: b for b in list_batches(store, MaterialType.STICKER)}
    assert batches[first.id].quantity_remaining == 0
    assert batches[second.id].quantity_remaining == 350
    assert_conserved(batches.values())

    usages = list_usage(store, MaterialType.STICKER, ack_number="ACK-1")
    assert [(u.batch_id, u.quantity_used) for u in usages] == [
        (first.id, Decimal("300")),
        (second.id, Decimal("50")),
    ]


def test_consume_more_than_available_changes_nothing(store):
    receive(store, "gunny", 100)
    before = store.load(GUNNY_STOCKS)

    result = consume_stock(store, MaterialType.GUNNY, 101)

    assert not result.ok
    assert result.available == 100
    assert store.load(GUNNY_STOCKS) == before
    assert store.load(GUNNY_USAGE) == []


def test_consume_exact_available_empties_ledger(store):
    receive(store, "gunny", 40)
    receive(store, "gunny", 60)

    assert consume_stock(store, MaterialType.GUNNY, 100).ok
    assert available_stock(store, MaterialType.GUNNY) == 0


def test_consume_rejects_non_positive_amount(store):
    receive(store, "gunny", 40)
    with pytest.raises(InvalidNumericInputError):
        consume_stock(store, MaterialType.GUNNY, 0)


def test_repeated_consumption_keeps_totals(store):
    for quantity in (120, 75, 310):
        receive(store, "gunny", quantity)

    for amount in (50, 100, 200, "0.5"):
        assert consume_stock(store, MaterialType.GUNNY, amount).ok

    summary = ledger_summary(store, MaterialType.GUNNY)
    assert summary.total_received == 505
    assert summary.total_used == Decimal("350.5")
    assert summary.total_remaining == Decimal("154.5")
    assert_conserved(list_batches(store, MaterialType.GUNNY))


def test_fractional_frk_consumption(store):
    receive(store, "frk", "10.25")
    receive(store, "frk", "5")

    assert consume_stock(store, MaterialType.FRK, "12.5").ok
    assert available_stock(store, MaterialType.FRK) == Decimal("2.75")


# -------------------------
# DEPLETION POLICY
# -------------------------
def test_exhausted_batches_are_retained_by_default(store):
    receive(store, "gunny", 300)
    receive(store, "gunny", 400)

    consume_stock(store, MaterialType.GUNNY, 350)

    batches = list_batches(store, MaterialType.GUNNY)
    assert len(batches) == 2
    assert batches[0].is_exhausted


def test_pruning_ledger_drops_exhausted_batches(store):
    receive(store, "gunny", 300)
    receive(store, "gunny", 400)

    ledger = InventoryLedger(store, MaterialType.GUNNY, prune_exhausted=True)
    result = ledger.consume(350)
    ledger.save()

    batches = list_batches(store, MaterialType.GUNNY)
    assert result.ok
    assert len(batches) == 1
    assert batches[0].quantity_remaining == 350
    assert available_stock(store, MaterialType.GUNNY) == 350


def test_plan_does_not_touch_the_ledger(store):
    receive(store, "sticker", 100)
    ledger = InventoryLedger(store, MaterialType.STICKER)

    planned = ledger.plan(60)

    assert planned.ok
    assert ledger.available() == 100
    assert store.load(REXIN_STICKERS)[0]["quantityRemaining"] == 100


# -------------------------
# RESTORE / DELETE
# -------------------------
def test_restore_credits_usage_back_to_its_batch(store):
    batch = receive(store, "gunny", 500)
    ledger = InventoryLedger(store, MaterialType.GUNNY)
    ledger.consume(200, ack_number="ACK-1")

    ledger.restore(ledger.usages_for_ack("ACK-1"))
    ledger.save()

    restored = list_batches(store, MaterialType.GUNNY)
    assert restored[0].id == batch.id
    assert restored[0].quantity_remaining == 500
    assert restored[0].quantity_used == 0
    assert list_usage(store, MaterialType.GUNNY) == []


def test_restore_of_pruned_batch_creates_returned_batch(store):
    receive(store, "gunny", 100)
    receive(store, "gunny", 100)
    ledger = InventoryLedger(store, MaterialType.GUNNY, prune_exhausted=True)
    ledger.consume(150, ack_number="ACK-2")

    ledger.restore(ledger.usages_for_ack("ACK-2"), returned_on=date(2025, 3, 1))

    assert ledger.available() == 200
    returned = [b for b in ledger.batches if b.source_tag == RETURNED_SOURCE_TAG]
    assert len(returned) == 1
    assert returned[0].quantity_received == 100
    assert returned[0].date_received == date(2025, 3, 1)
    assert_conserved(ledger.batches)


def test_delete_batch_removes_its_usage(store):
    batch = receive(store, "gunny", 100)
    consume_stock(store, MaterialType.GUNNY, 30)

    delete_batch(store, MaterialType.GUNNY, batch.id)

    assert list_batches(store, MaterialType.GUNNY) == []
    assert list_usage(store, MaterialType.GUNNY) == []


def test_delete_unknown_batch(store):
    with pytest.raises(NotFoundError):
        delete_batch(store, MaterialType.GUNNY, "missing")
