# File: tests/test_collection_items_api.py
"""Tests for the collection item API."""

import io

from openpyxl import load_workbook

from salestrack.core.sales_export import XLSX_MEDIA_TYPE
from tests.factories import CollectionItemFactory, make_workbook


class TestCollectionItemsApi:
    """Test catalog listing, lookup, import and export."""

    async def test_list_only_own_items(self, db_client):
        await CollectionItemFactory.create(db_client.db_session, name="Tote", upc="1")
        await CollectionItemFactory.create(
            db_client.db_session, owner_id="other-owner", name="Pouch", upc="2"
        )

        response = await db_client.get("/api/collection-items")

        assert response.status_code == 200
        assert [i["name"] for i in response.json()] == ["Tote"]

    async def test_lookup_by_upc(self, db_client):
        await CollectionItemFactory.create(db_client.db_session, name="Tote", upc="4800001")

        response = await db_client.get("/api/collection-items/by-upc/4800001")

        assert response.status_code == 200
        assert response.json()["name"] == "Tote"

    async def test_lookup_unknown_upc(self, db_client):
        response = await db_client.get("/api/collection-items/by-upc/0000")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_import_upserts(self, db_client):
        """Test existing UPCs update and new ones are created."""
        await CollectionItemFactory.create(db_client.db_session, name="Old", upc="4800001")
        content = make_workbook(
            [
                {"Name": "New", "UPC": "4800001", "Price": "650"},
                {"Name": "Pouch", "UPC": "4800002"},
                {"Name": "No code", "UPC": ""},
            ]
        )

        response = await db_client.post(
            "/api/collection-items/import",
            files={"file": ("catalog.xlsx", content, XLSX_MEDIA_TYPE)},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "created": 1,
            "updated": 1,
            "errors": ["Row 4: Missing UPC"],
            "total_errors": 1,
        }

    async def test_export(self, db_client):
        await CollectionItemFactory.create(db_client.db_session, name="Tote", upc="4800001")

        response = await db_client.get("/api/collection-items/export")

        assert response.status_code == 200
        ws = load_workbook(io.BytesIO(response.content)).active
        assert ws.cell(row=2, column=2).value == "4800001"
