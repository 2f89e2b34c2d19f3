"""Integration tests for the REST API adapter."""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from tablestore.adapters.inbound import create_app, status_for
from tablestore.application import RecordStore
from tablestore.domain.errors import (
    LockUnusableError,
    MissingColumnError,
    SnapshotCorruptError,
    SnapshotWriteError,
    TableExistsError,
    TableNotFoundError,
    TypeMismatchError,
)


@pytest.fixture
def client(store: RecordStore) -> Generator[TestClient, None, None]:
    with TestClient(create_app(store)) as test_client:
        yield test_client


def _create_n_table(client: TestClient, name: str = "t") -> dict:
    response = client.post(
        "/tables", json={"name": name, "columns": [{"name": "n", "column_type": "Integer"}]}
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
class TestHealth:
    @pytest.mark.parametrize("path", ["/", "/health"])
    def test_health(self, client: TestClient, path: str) -> None:
        response = client.get(path)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_statistics(self, client: TestClient) -> None:
        _create_n_table(client, "a")
        _create_n_table(client, "b")

        response = client.get("/statistics")

        assert response.status_code == 200
        body = response.json()
        assert body["tables"] == 2
        assert body["uptime_ms"] >= 0


@pytest.mark.integration
class TestTables:
    def test_create_describe_list(self, client: TestClient) -> None:
        created = client.post(
            "/tables",
            json={
                "name": "people",
                "columns": [
                    {"name": "name", "column_type": "String"},
                    {"name": "age", "column_type": "Integer"},
                    {"name": "meta", "column_type": "Object"},
                ],
            },
        )

        assert created.status_code == 201
        body = created.json()
        assert body["name"] == "people"
        assert body["rows"] == 0
        assert [c["column_type"] for c in body["columns"]] == ["String", "Integer", "Object"]

        described = client.get("/tables/people").json()
        assert described == body
        assert client.get("/tables").json() == {"tables": ["people"]}

    def test_duplicate_is_conflict(self, client: TestClient) -> None:
        _create_n_table(client)

        response = client.post("/tables", json={"name": "t", "columns": []})

        assert response.status_code == 409
        assert response.json() == {"error": "Table 't' already exists"}

    def test_unknown_column_type_is_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/tables", json={"name": "t", "columns": [{"name": "d", "column_type": "Decimal"}]}
        )

        assert response.status_code == 422
        assert client.get("/tables").json() == {"tables": []}

    def test_empty_name_is_accepted(self, client: TestClient) -> None:
        response = client.post("/tables", json={"name": "", "columns": []})

        assert response.status_code == 201
        assert response.json()["name"] == ""
        assert client.get("/tables").json() == {"tables": [""]}

    def test_get_missing(self, client: TestClient) -> None:
        response = client.get("/tables/ghost")

        assert response.status_code == 404
        assert response.json() == {"error": "Table 'ghost' not found"}

    def test_delete(self, client: TestClient) -> None:
        _create_n_table(client)

        response = client.delete("/tables/t")

        assert response.status_code == 200
        assert response.json() == {"deleted": True, "table": "t"}
        assert client.get("/tables/t").status_code == 404

    def test_delete_missing(self, client: TestClient) -> None:
        response = client.delete("/tables/ghost")

        assert response.status_code == 404


@pytest.mark.integration
class TestRows:
    def test_insert_and_list(self, client: TestClient) -> None:
        _create_n_table(client)

        inserted = client.post("/tables/t/rows", json={"row": {"n": 5}})

        assert inserted.status_code == 200
        assert inserted.json() == {"table": "t", "row_inserted": True, "rows_count": 1}
        listed = client.get("/tables/t/rows")
        assert listed.json() == {"table": "t", "rows": [{"n": 5}], "count": 1}

    def test_float_value_in_integer_column(self, client: TestClient) -> None:
        _create_n_table(client)

        response = client.post("/tables/t/rows", json={"row": {"n": 5.0}})

        assert response.status_code == 400
        assert response.json() == {"error": "Column 'n' type mismatch"}

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_float_is_rejected(self, client: TestClient, literal: str) -> None:
        client.post(
            "/tables", json={"name": "f", "columns": [{"name": "x", "column_type": "Float"}]}
        )

        response = client.post(
            "/tables/f/rows",
            content=f'{{"row": {{"x": {literal}}}}}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Column 'x' type mismatch"}
        assert client.get("/tables/f/rows").json()["rows"] == []

    def test_missing_column(self, client: TestClient) -> None:
        _create_n_table(client)

        response = client.post("/tables/t/rows", json={"row": {"m": 1}})

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required column 'n'"}

    def test_insert_into_missing_table(self, client: TestClient) -> None:
        response = client.post("/tables/ghost/rows", json={"row": {"n": 1}})

        assert response.status_code == 404

    def test_list_rows_missing_table(self, client: TestClient) -> None:
        assert client.get("/tables/ghost/rows").status_code == 404

    def test_nested_values_round_trip(self, client: TestClient) -> None:
        client.post(
            "/tables", json={"name": "docs", "columns": [{"name": "o", "column_type": "Object"}]}
        )
        row = {"o": {"list": [1, 2.5, None, True], "inner": {"s": "x"}}, "extra": "kept"}

        client.post("/tables/docs/rows", json={"row": row})

        assert client.get("/tables/docs/rows").json()["rows"] == [row]

    def test_row_body_must_be_object(self, client: TestClient) -> None:
        _create_n_table(client)

        response = client.post("/tables/t/rows", json={"row": [1, 2]})

        assert response.status_code == 422


@pytest.mark.integration
class TestFailures:
    def test_persistence_failure_is_server_error(
        self, client: TestClient, memory_snapshots
    ) -> None:
        memory_snapshots.fail_saves = True

        response = client.post("/tables", json={"name": "t", "columns": []})

        assert response.status_code == 500
        assert response.json() == {"error": "Write error: disk full"}
        memory_snapshots.fail_saves = False
        assert client.get("/tables").json() == {"tables": []}

    def test_poisoned_lock_is_server_error(self, client: TestClient, store: RecordStore) -> None:
        store.lock.acquire_write()
        store.lock.release_write(poison=True)

        response = client.get("/tables")

        assert response.status_code == 500
        assert response.json() == {"error": "database lock is poisoned"}


@pytest.mark.unit
@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (TableExistsError("t"), 409),
        (TableNotFoundError("t"), 404),
        (MissingColumnError("c"), 400),
        (TypeMismatchError("c"), 400),
        (SnapshotWriteError("x"), 500),
        (SnapshotCorruptError("p", "x"), 500),
        (LockUnusableError(), 500),
    ],
)
def test_status_for(error: Exception, expected: int) -> None:
    assert status_for(error) == expected
