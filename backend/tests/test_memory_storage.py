"""Tests for the in-memory storage client and where matching."""

import pytest

from adminkit.persistence.adapter import EntityDelegate, RecordNotFoundError, StorageClient
from adminkit.persistence.memory import InMemoryStorageClient, matches


@pytest.fixture
def client():
    return InMemoryStorageClient()


@pytest.fixture
def widgets(client):
    return client.delegate("widget")


class TestProtocol:
    def test_satisfies_protocols(self, client, widgets):
        assert isinstance(client, StorageClient)
        assert isinstance(widgets, EntityDelegate)

    def test_delegate_names_are_case_insensitive(self, client):
        assert client.delegate("ItemAttribute")._table is client.delegate("itemattribute")._table


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, widgets):
        record = await widgets.create({"name": "Lamp"})
        assert record["id"]
        assert record["createdAt"] == record["updatedAt"]

    @pytest.mark.asyncio
    async def test_records_are_copied(self, widgets):
        data = {"name": "Lamp", "tags": ["a"]}
        record = await widgets.create(data)
        data["tags"].append("b")
        record["tags"].append("c")

        stored = await widgets.find_first({"id": record["id"]})
        assert stored["tags"] == ["a"]

    @pytest.mark.asyncio
    async def test_update_merges_and_touches(self, widgets):
        record = await widgets.create({"name": "Lamp", "price": 1})
        updated = await widgets.update(record["id"], {"price": 2})
        assert updated["name"] == "Lamp"
        assert updated["price"] == 2
        assert updated["updatedAt"] >= record["updatedAt"]
        assert updated["createdAt"] == record["createdAt"]

    @pytest.mark.asyncio
    async def test_update_missing_record(self, widgets):
        with pytest.raises(RecordNotFoundError):
            await widgets.update("missing", {"name": "x"})

    @pytest.mark.asyncio
    async def test_find_many_order_and_window(self, widgets):
        for name, price in (("a", 3), ("b", None), ("c", 1), ("d", 2)):
            await widgets.create({"name": name, "price": price})

        ordered = await widgets.find_many({}, order_by={"price": "asc"})
        assert [r["name"] for r in ordered] == ["c", "d", "a", "b"]

        descending = await widgets.find_many({}, order_by={"price": "desc"})
        assert [r["name"] for r in descending] == ["a", "d", "c", "b"]

        page = await widgets.find_many({}, order_by={"name": "asc"}, skip=1, take=2)
        assert [r["name"] for r in page] == ["b", "c"]

    @pytest.mark.asyncio
    async def test_count(self, widgets):
        await widgets.create({"name": "a", "tenantId": "t1"})
        await widgets.create({"name": "b", "tenantId": "t2"})
        assert await widgets.count({}) == 2
        assert await widgets.count({"tenantId": "t1"}) == 1

    def test_close_drops_data(self, client):
        client.delegate("widget")._table["x"] = {"id": "x"}
        client.close()
        assert client.delegate("widget")._table == {}


class TestMatches:
    record = {"name": "Desk Lamp", "price": 10, "tenantId": None, "status": "ACTIVE"}

    @pytest.mark.parametrize(
        ("where", "expected"),
        [
            ({}, True),
            ({"name": "Desk Lamp"}, True),
            ({"name": "desk lamp"}, False),
            ({"tenantId": None}, True),
            ({"tenantId": "t1"}, False),
            ({"missing": None}, True),
            ({"name": {"contains": "Lamp"}}, True),
            ({"name": {"contains": "lamp"}}, False),
            ({"name": {"contains": "lamp", "mode": "insensitive"}}, True),
            ({"name": {"startsWith": "DESK", "mode": "insensitive"}}, True),
            ({"price": {"gte": 10, "lte": 20}}, True),
            ({"price": {"gt": 10}}, False),
            ({"price": {"lt": 10}}, False),
            ({"status": {"in": ["ACTIVE", "DRAFT"]}}, True),
            ({"status": {"notIn": ["ACTIVE"]}}, False),
            ({"status": {"not": "ARCHIVED"}}, True),
            ({"status": {"equals": "ACTIVE"}}, True),
            ({"OR": [{"name": "x"}, {"price": 10}]}, True),
            ({"OR": [{"name": "x"}, {"price": 11}]}, False),
            ({"AND": [{"price": 10}, {"status": "ACTIVE"}]}, True),
            ({"NOT": {"status": "ACTIVE"}}, False),
        ],
    )
    def test_where_clauses(self, where, expected):
        assert matches(self.record, where) is expected

    def test_range_never_matches_null(self):
        assert matches({"price": None}, {"price": {"gte": 0}}) is False

    def test_plain_dict_values_compare_by_equality(self):
        record = {"settings": {"currency": "USD"}}
        assert matches(record, {"settings": {"currency": "USD"}}) is True
