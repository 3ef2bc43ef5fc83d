from datetime import date

from conftest import stock_for_consignments

from ricemill.constants.collections import PURCHASE_PAYMENTS, RICE_PRODUCTIONS
from ricemill.schemas.fci.consignment_schemas import ConsignmentCreate
from ricemill.schemas.ledger.freight_schemas import LorryFreightCreate
from ricemill.services.fci.consignment_service import create_consignment
from ricemill.services.ledger.freight_service import create_freight
from ricemill.services.references.reference_index import ReferenceIndex, reference_report


def test_lookups_by_id_and_ack(store):
    stock_for_consignments(store)
    consignment = create_consignment(
        store, ConsignmentCreate(ack_number="ACK-1", consignment_date=date(2025, 2, 1))
    )
    store.save(RICE_PRODUCTIONS, [{"id": "p1", "ackNumber": "ACK-1"}])

    index = ReferenceIndex(store)

    assert index.consignment(consignment.id)["ackNumber"] == "ACK-1"
    assert index.consignment_for_ack("ACK-1")["id"] == consignment.id
    assert index.production_for_ack("ACK-1")["id"] == "p1"
    assert index.consignment("missing") is None


def test_clean_store_reports_nothing(store):
    stock_for_consignments(store)
    consignment = create_consignment(
        store, ConsignmentCreate(ack_number="ACK-1", consignment_date=date(2025, 2, 1))
    )
    create_freight(
        store,
        LorryFreightCreate(consignment_id=consignment.id, transporter_name="X", freight_per_mt=1000),
    )
    store.save(RICE_PRODUCTIONS, [{"id": "p1", "ackNumber": "ACK-1"}])

    report = reference_report(store)

    assert report.clean
    assert report.consignments_without_production == []


def test_dangling_references_are_reported(store):
    create_freight(
        store,
        LorryFreightCreate(consignment_id="ghost", transporter_name="X", freight_per_mt=1000),
    )
    store.save(PURCHASE_PAYMENTS, [{"id": "pp1", "purchaseId": "gone"}])
    store.save(RICE_PRODUCTIONS, [{"id": "p1", "ackNumber": "ACK-77"}])

    report = reference_report(store)

    assert not report.clean
    assert {(d.collection, d.value) for d in report.dangling} == {
        ("lorryFreights", "ghost"),
        ("purchasePayments", "gone"),
    }
    assert report.productions_without_consignment == ["ACK-77"]
