import asyncio
import os
import sys
from datetime import date

import pytest
from fastapi.testclient import TestClient

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from inventory_tracker.core.config import Settings
from inventory_tracker.main import create_app
from inventory_tracker.storage import DatabaseStorage, MemoryStorage


def make_settings(tmp_path, backend, **overrides):
    values = {
        "STORAGE_BACKEND": backend,
        "DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "NOTIFICATION_SCAN_ENABLED": False,
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(params=["memory", "database"])
def backend(request):
    return request.param


@pytest.fixture
def settings(tmp_path, backend):
    return make_settings(tmp_path, backend)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as client:
        yield client


@pytest.fixture
def run_scenario(tmp_path, backend):
    """Run ``scenario(storage)`` on a fresh, started storage inside one event loop."""

    def run(scenario):
        async def main():
            if backend == "memory":
                storage = MemoryStorage()
            else:
                storage = DatabaseStorage(f"sqlite+aiosqlite:///{tmp_path / 'storage.db'}")
            await storage.startup()
            try:
                return await scenario(storage)
            finally:
                await storage.shutdown()

        return asyncio.run(main())

    return run


@pytest.fixture
def invoice(client):
    response = client.post(
        "/api/invoices",
        data={"invoiceNumber": "INV-1001", "vendorName": "Office Depot", "purchaseDate": "2026-09-01"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def create_item(client, invoice):
    def create(name="Chair", category="Furniture", quantity_purchased=10, unit_price=25.0, invoice_id=None):
        response = client.post(
            "/api/items",
            json={
                "name": name,
                "category": category,
                "quantityPurchased": quantity_purchased,
                "unitPrice": unit_price,
                "invoiceId": invoice_id or invoice["id"],
            },
        )
        assert response.status_code == 201
        return response.json()[0]

    return create


def assignment_payload(item_id, quantity, assigned_to="Dana Whitfield", assignment_date=None, reason=None):
    payload = {
        "itemId": item_id,
        "quantity": quantity,
        "assignedTo": assigned_to,
        "assignmentDate": (assignment_date or date(2026, 10, 1)).isoformat(),
    }
    if reason is not None:
        payload["reason"] = reason
    return payload
