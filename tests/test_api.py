import pytest
from fastapi.testclient import TestClient

from main import app
from ricemill.core.store import get_store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def receive(client, material, quantity):
    return client.post(
        f"/inventory/{material}/batches",
        json={"quantity": quantity, "dateReceived": "2025-01-01"},
    )


def test_health(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


# -------------------------
# INVENTORY
# -------------------------
def test_receive_stock_uses_camel_case(client):
    res = receive(client, "gunny", 600)

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["data"]["quantityRemaining"] == 600
    assert body["data"]["materialType"] == "gunny"
    assert "X-Process-Time-Ms" in res.headers


def test_blank_quantity_is_rejected(client, store):
    res = receive(client, "gunny", "")

    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error_code"] == "INVALID_NUMERIC_INPUT"
    assert body["details"]["field"] == "quantity"
    assert store.keys() == []


def test_consume_shortfall_is_conflict(client):
    receive(client, "frk", "12.5")

    res = client.post("/inventory/frk/consume", json={"amount": 13})

    assert res.status_code == 409
    assert res.json()["details"]["frk"]["available"] == "12.5"


# -------------------------
# CONSIGNMENTS
# -------------------------
def test_consignment_flow(client):
    receive(client, "gunny", 600)
    receive(client, "sticker", 600)

    created = client.post(
        "/consignments/",
        json={"ackNumber": "ACK-1", "consignmentDate": "2025-02-01"},
    )
    assert created.status_code == 200
    assert created.json()["data"]["totalBags"] == 580
    assert created.json()["data"]["riceQuantity"] == 290

    refused = client.post(
        "/consignments/",
        json={"ackNumber": "ACK-2", "consignmentDate": "2025-02-02"},
    )
    assert refused.status_code == 409
    body = refused.json()
    assert body["error_code"] == "INSUFFICIENT_STOCK"
    assert body["details"]["gunny"]["available"] == "20"

    listed = client.get("/consignments/")
    assert listed.json()["data"]["total"] == 1


def test_unknown_consignment_envelope(client):
    res = client.get("/consignments/does-not-exist")

    assert res.status_code == 404
    assert res.json() == {
        "success": False,
        "message": "Consignment not found",
        "error_code": "CONSIGNMENT_NOT_FOUND",
        "details": None,
    }


def test_unknown_route_envelope(client):
    res = client.get("/nowhere")

    assert res.status_code == 404
    assert res.json()["error_code"] == "NOT_FOUND"


# -------------------------
# ELECTRICITY
# -------------------------
def test_calculate_bill(client):
    res = client.post(
        "/electricity/calculate",
        json={
            "previousKwh": 10000,
            "currentKwh": 14000,
            "previousKvah": 8000,
            "currentKvah": 11200,
            "rmd": 100,
        },
    )

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["billAmount"] == 83908
    assert data["powerFactor"] == 1.25
    assert data["pfAdjustment"] == -12570


def test_calculate_bill_without_kvah(client):
    res = client.post(
        "/electricity/calculate",
        json={
            "previousKwh": 100,
            "currentKwh": 200,
            "previousKvah": 50,
            "currentKvah": 50,
            "rmd": 10,
        },
    )

    assert res.status_code == 422
    assert res.json()["error_code"] == "UNDEFINED_RATIO"


# -------------------------
# BACKUP
# -------------------------
def test_backup_export_and_import(client, store):
    receive(client, "gunny", 100)

    exported = client.get("/backup/export").json()
    assert exported["version"] == "1.0"
    assert len(exported["gunnyStocks"]) == 1

    store.delete("gunnyStocks")
    imported = client.post("/backup/import", json=exported)

    assert imported.status_code == 200
    assert imported.json()["data"]["imported"]["gunnyStocks"] == 1
    assert len(store.load("gunnyStocks")) == 1


def test_backup_import_rejects_missing_version(client):
    res = client.post("/backup/import", json={"gunnyStocks": []})

    assert res.status_code == 400
    assert res.json()["error_code"] == "INVALID_BACKUP"


def test_backup_import_rejects_malformed_record(client, store):
    res = client.post(
        "/backup/import",
        json={
            "version": "1.0",
            "exportDate": "2025-03-01T10:00:00+00:00",
            "gunnyStocks": [{"id": "g1", "quantity": "", "dateReceived": "2025-01-01"}],
        },
    )

    assert res.status_code == 400
    body = res.json()
    assert body["error_code"] == "INVALID_BACKUP"
    assert body["details"]["collection"] == "gunnyStocks"
    assert body["details"]["index"] == 0
    assert store.load("gunnyStocks") == []


# -------------------------
# PRODUCTION
# -------------------------
def test_rice_production_flow(client):
    plan = client.get("/production/plan", params={"ackQuantity": 2, "riceType": "raw"})
    assert plan.status_code == 200
    assert plan.json()["data"]["riceProduced"] == 580

    refused = client.post(
        "/production/rice",
        json={"ackQuantity": 1, "riceType": "boiled", "productionDate": "2025-02-01"},
    )
    assert refused.status_code == 409
    assert refused.json()["error_code"] == "INSUFFICIENT_STOCK"
    assert refused.json()["details"]["paddy"]["available"] == "0"

    paddy = client.post(
        "/production/paddy",
        json={"date": "2025-01-20", "newBags": 500, "oldBags": 100, "totalQuintals": 1000},
    )
    assert paddy.status_code == 200
    assert paddy.json()["data"]["totalBags"] == 600

    created = client.post(
        "/production/rice",
        json={"ackQuantity": 1, "riceType": "boiled", "productionDate": "2025-02-01"},
    )
    assert created.status_code == 200
    assert created.json()["data"]["ackNumber"] == "1 ACK BOILED"

    assert client.get("/production/rice", params={"riceType": "raw"}).json()["data"]["total"] == 0
    summary = client.get("/production/summary").json()["data"]
    assert summary["totalAcks"] == 1
    assert summary["paddy"]["received"] == 1000


def test_unknown_rice_production_envelope(client):
    res = client.delete("/production/rice/nope")

    assert res.status_code == 404
    assert res.json()["error_code"] == "PRODUCTION_NOT_FOUND"


def test_by_product_sale_flow(client):
    produced = client.post(
        "/by-products/productions",
        json={"productionDate": "2025-02-05", "productType": "husk", "quantity": 100},
    )
    assert produced.status_code == 200
    assert produced.json()["data"]["correlatedACKs"] == 0

    sale = client.post(
        "/by-products/sales",
        json={
            "saleDate": "2025-03-01",
            "invoiceNumber": "BP-001",
            "partyName": "Lakshmi Feeds",
            "items": [{"productType": "husk", "quantity": 40, "rate": 500}],
        },
    )
    assert sale.status_code == 200
    sale_id = sale.json()["data"]["id"]
    assert sale.json()["data"]["totalAmount"] == 21000

    paid = client.post(f"/by-products/sales/{sale_id}/payments", json={"amount": 21000})
    assert paid.status_code == 200

    over = client.post(f"/by-products/sales/{sale_id}/payments", json={"amount": 1})
    assert over.status_code == 400
    assert over.json()["error_code"] == "OVERPAYMENT"

    stock = {s["productType"]: s for s in client.get("/by-products/stock").json()["data"]}
    assert stock["husk"]["currentStock"] == 60

    payments = client.get("/by-products/payments", params={"saleId": sale_id}).json()
    assert payments["data"]["total"] == 1


def test_by_product_oversell_is_conflict(client):
    res = client.post(
        "/by-products/sales",
        json={
            "saleDate": "2025-03-01",
            "invoiceNumber": "BP-002",
            "partyName": "Lakshmi Feeds",
            "items": [{"productType": "ash", "quantity": 5, "rate": 100}],
        },
    )

    assert res.status_code == 409
    assert res.json()["details"]["ash"]["required"] == "5"
