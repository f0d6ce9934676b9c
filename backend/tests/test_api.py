"""Integration tests for the HTTP API over in-memory storage."""

import pytest
from fastapi.testclient import TestClient

from adminkit.api.app import create_app
from adminkit.bootstrap import build_registry
from adminkit.config import AppConfig
from adminkit.persistence.memory import InMemoryStorageClient

T1 = {"X-Tenant-ID": "t1"}
T2 = {"X-Tenant-ID": "t2"}


def make_client(**config) -> TestClient:
    app = create_app(
        registry=build_registry(),
        client=InMemoryStorageClient(),
        config=AppConfig(**config),
    )
    return TestClient(app)


@pytest.fixture
def api():
    return make_client()


def create_org(api, name="Acme Corp", headers=T1, **data):
    response = api.post("/api/organization", json={"data": {"name": name, **data}}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


# =============================================================================
# CRUD endpoints
# =============================================================================


class TestCrudEndpoints:
    def test_create(self, api):
        record = create_org(api)
        assert record["slug"] == "acme-corp"
        assert record["tenantId"] == "t1"
        assert record["isActive"] is True
        assert record["id"]

    def test_get(self, api):
        record = create_org(api)
        response = api.get(f"/api/organization/{record['id']}", headers=T1)
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Acme Corp"

    def test_get_missing(self, api):
        response = api.get("/api/organization/missing", headers=T1)
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_get_other_tenant_is_not_found(self, api):
        record = create_org(api)
        response = api.get(f"/api/organization/{record['id']}", headers=T2)
        assert response.status_code == 404

    def test_update(self, api):
        record = create_org(api)
        response = api.put(
            f"/api/organization/{record['id']}",
            json={"data": {"description": "Widgets and more"}},
            headers=T1,
        )
        assert response.status_code == 200
        assert response.json()["data"]["description"] == "Widgets and more"

    def test_update_other_tenant(self, api):
        record = create_org(api)
        response = api.put(
            f"/api/organization/{record['id']}",
            json={"data": {"description": "x"}},
            headers=T2,
        )
        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "TENANT_ERROR"
        assert body["field"] == "tenantId"

    def test_delete(self, api):
        record = create_org(api)
        response = api.delete(f"/api/organization/{record['id']}", headers=T1)
        assert response.status_code == 200
        assert response.json() == {"success": True}

        stored = api.get(f"/api/organization/{record['id']}", headers=T1).json()["data"]
        assert stored["isActive"] is False

    def test_delete_vetoed(self, api):
        org = create_org(api)
        response = api.post(
            "/api/store",
            json={"data": {"name": "Main Street", "organizationId": org["id"]}},
            headers=T1,
        )
        assert response.status_code == 201

        response = api.delete(f"/api/organization/{org['id']}", headers=T1)
        assert response.status_code == 409
        assert response.json()["code"] == "DELETE_VETOED"

    def test_missing_body_envelope(self, api):
        response = api.post("/api/organization", json={"name": "Acme"}, headers=T1)
        assert response.status_code == 422

    def test_unknown_entity(self, api):
        assert api.get("/api/gadget", headers=T1).status_code == 404


class TestListEndpoint:
    @pytest.fixture
    def seeded(self, api):
        for name in ("Acme", "Globex", "Initech"):
            create_org(api, name)
        create_org(api, "Umbrella", headers=T2)
        return api

    def test_pagination(self, seeded):
        query = "page=2&limit=2&sortBy=name&sortOrder=asc"
        response = seeded.get(f"/api/organization?{query}", headers=T1)
        assert response.status_code == 200
        body = response.json()
        assert [r["name"] for r in body["data"]] == ["Initech"]
        assert body["pagination"] == {"total": 3, "page": 2, "limit": 2, "totalPages": 2}

    def test_defaults(self, seeded):
        body = seeded.get("/api/organization", headers=T1).json()
        assert body["pagination"]["page"] == 1
        assert body["pagination"]["limit"] == 20
        assert {r["name"] for r in body["data"]} == {"Acme", "Globex", "Initech"}

    def test_search(self, seeded):
        body = seeded.get("/api/organization?search=GLOB", headers=T1).json()
        assert [r["name"] for r in body["data"]] == ["Globex"]

    def test_tenant_query_parameter(self, seeded):
        body = seeded.get("/api/organization?tenantId=t2").json()
        assert [r["name"] for r in body["data"]] == ["Umbrella"]

    def test_invalid_sort(self, seeded):
        response = seeded.get("/api/organization?sortBy=ghost", headers=T1)
        assert response.status_code == 422
        assert response.json()["errors"][0]["code"] == "INVALID_SORT"

    def test_limit_out_of_range(self, seeded):
        response = seeded.get("/api/organization?limit=500", headers=T1)
        assert response.status_code == 422

    def test_stats(self, seeded):
        response = seeded.get("/api/organization/stats", headers=T1)
        assert response.status_code == 200
        assert response.json()["data"] == {"total": 3, "active": 3, "inactive": 0}


# =============================================================================
# Bulk operations and entity actions
# =============================================================================


class TestBulkEndpoint:
    def test_bulk_deactivate(self, api):
        ids = [create_org(api, name)["id"] for name in ("Acme", "Globex")]
        response = api.post(
            "/api/organization/bulk", json={"ids": ids, "action": "deactivate"}, headers=T1
        )
        assert response.status_code == 200
        assert response.json()["data"] == {"action": "deactivate", "updated": ids, "vetoed": []}

        stats = api.get("/api/organization/stats", headers=T1).json()["data"]
        assert stats == {"total": 2, "active": 0, "inactive": 2}

    def test_bulk_delete_reports_vetoes(self, api):
        busy = create_org(api, "Acme")
        idle = create_org(api, "Globex")
        api.post(
            "/api/store",
            json={"data": {"name": "Main Street", "organizationId": busy["id"]}},
            headers=T1,
        )

        response = api.post(
            "/api/organization/bulk",
            json={"ids": [busy["id"], idle["id"]], "action": "delete"},
            headers=T1,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["updated"] == [idle["id"]]
        assert data["vetoed"] == [busy["id"]]

    def test_bulk_other_tenant(self, api):
        record = create_org(api)
        response = api.post(
            "/api/organization/bulk", json={"ids": [record["id"]], "action": "delete"}, headers=T2
        )
        assert response.status_code == 403

    def test_bulk_unknown_action(self, api):
        record = create_org(api)
        body = {"ids": [record["id"]], "action": "archive"}
        response = api.post("/api/organization/bulk", json=body, headers=T1)
        assert response.status_code == 422
        assert response.json()["errors"][0]["code"] == "INVALID_ACTION"


class TestEntityActions:
    def test_category_tree(self, api):
        base = {"organizationId": "org-1", "storeId": "store-1"}
        parent = api.post(
            "/api/category", json={"data": {"name": "Lighting", **base}}, headers=T1
        ).json()["data"]
        api.post(
            "/api/category",
            json={"data": {"name": "Lamps", "parentId": parent["id"], **base}},
            headers=T1,
        )

        response = api.get("/api/category/tree?storeId=store-1", headers=T1)
        assert response.status_code == 200
        [root] = response.json()["data"]
        assert root["name"] == "Lighting"
        assert [child["name"] for child in root["children"]] == ["Lamps"]

    def test_category_tree_requires_store(self, api):
        response = api.get("/api/category/tree", headers=T1)
        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "storeId"

    def test_organization_by_slug(self, api):
        create_org(api)
        response = api.get("/api/organization/by-slug/acme-corp", headers=T1)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "Acme Corp"
        assert data["storeCount"] == 0

        assert api.get("/api/organization/by-slug/acme-corp", headers=T2).status_code == 404

    def test_store_hours_and_open(self, api):
        hours = {"monday": {"open": "09:00", "close": "17:00"}}
        shop = api.post(
            "/api/store",
            json={
                "data": {"name": "Main Street", "organizationId": "org-1", "operatingHours": hours}
            },
            headers=T1,
        ).json()["data"]

        params = {"at": "2024-05-06T12:00:00+02:00"}
        response = api.get(f"/api/store/{shop['id']}/open", params=params, headers=T1)
        assert response.status_code == 200
        assert response.json()["data"] == {"at": "2024-05-06T10:00:00+00:00", "isOpen": True}

        response = api.get(f"/api/store/{shop['id']}/hours", params=params, headers=T1)
        assert response.json()["data"]["day"] == "monday"

    def test_store_action_errors(self, api):
        assert api.get("/api/store/missing/open", headers=T1).status_code == 404

        shop = api.post(
            "/api/store",
            json={"data": {"name": "Main Street", "organizationId": "org-1"}},
            headers=T1,
        ).json()["data"]
        response = api.get(f"/api/store/{shop['id']}/open?at=whenever", headers=T1)
        assert response.status_code == 422


# =============================================================================
# Error translation and tenant resolution
# =============================================================================


class TestErrors:
    def test_validation_error_body(self, api):
        response = api.post(
            "/api/organization", json={"data": {"email": "not-an-email"}}, headers=T1
        )
        assert response.status_code == 422
        body = response.json()
        assert body["valid"] is False
        assert body["code"] == "VALIDATION_ERROR"
        fields = {e["field"] for e in body["errors"]}
        assert {"name", "email"} <= fields

    def test_business_logic_error(self, api):
        response = api.post(
            "/api/category",
            json={
                "data": {
                    "name": "Lamps",
                    "organizationId": "org-1",
                    "storeId": "store-1",
                    "parentId": "missing",
                }
            },
            headers=T1,
        )
        assert response.status_code == 409
        assert response.json()["code"] == "BUSINESS_LOGIC_ERROR"


class TestTenantResolution:
    def test_tenant_header_alias(self, api):
        record = create_org(api, headers={"Tenant-ID": "t9"})
        assert record["tenantId"] == "t9"

    def test_default_tenant(self):
        api = make_client(default_tenant_id="t5")
        assert create_org(api, headers={})["tenantId"] == "t5"

    def test_no_tenant_means_unscoped(self, api):
        assert create_org(api, headers={})["tenantId"] is None

    def test_tenant_required(self):
        api = make_client(require_tenant=True)
        response = api.get("/api/organization")
        assert response.status_code == 400
        assert response.json()["code"] == "TENANT_REQUIRED"

        assert api.get("/api/organization", headers=T1).status_code == 200


# =============================================================================
# Metadata endpoints
# =============================================================================


class TestMetadataEndpoints:
    def test_list(self, api):
        entities = api.get("/api/metadata").json()["entities"]
        assert [e["name"] for e in entities] == [
            "organization",
            "store",
            "category",
            "item",
            "itemAttribute",
            "user",
        ]

    def test_entity(self, api):
        route = api.get("/api/metadata/item").json()
        assert route["displayName"] == "Items"
        assert route["hasBusinessLogic"] is True
        assert "sku" in route["schema"]["required"]
        assert route["updateSchema"]["required"] == ["id"]

    def test_unknown_entity(self, api):
        assert api.get("/api/metadata/ghost").status_code == 404
        assert api.get("/api/metadata/ghost/form").status_code == 404
        assert api.get("/api/metadata/ghost/table").status_code == 404

    def test_form(self, api):
        form = api.get("/api/metadata/category/form").json()
        assert form["title"] == "Categories"
        assert form["sections"][0]["title"] == "Basic Information"

    def test_table(self, api):
        columns = api.get("/api/metadata/item/table").json()["columns"]
        assert columns[0]["key"] == "name"
        assert columns[2]["align"] == "right"

    def test_navigation(self, api):
        sections = api.get("/api/metadata/navigation").json()["sections"]
        assert [s["name"] for s in sections] == ["Organization", "Catalog", "Administration"]

    def test_endpoints(self, api):
        endpoints = api.get("/api/metadata/endpoints").json()["endpoints"]
        assert endpoints[0]["routes"]["stats"] == "GET /api/organization/stats"

    def test_stats(self, api):
        stats = api.get("/api/metadata/stats").json()
        assert stats["total"] == 6
        assert stats["entities"][0]["requiredFields"][0] == "name"
