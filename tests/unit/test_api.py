import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from sqlbridge.main import app, container


class DummyLLM:
    def __init__(self, response: str) -> None:
        self.response = response

    async def acomplete(self, prompt: str) -> str:
        return self.response


@pytest.fixture
def client():
    container.connection_registry.reset()
    container.llm.override(providers.Object(None))
    with TestClient(app) as test_client:
        yield test_client
    container.llm.reset_override()
    container.connection_registry.reset()


def _connect_sqlite(client, tmp_path) -> str:
    response = client.post("/api/v1/db/connect", json={"type": "sqlite", "path": str(tmp_path / "api.db")})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Connected to sqlite database successfully"
    assert body["connectionId"].startswith("db_")
    return body["connectionId"]


def _query(client, connection_id: str, sql: str):
    return client.post("/api/v1/db/query", json={"connectionId": connection_id, "query": sql})


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json().get("status") == "ok"


def test_connect_query_schema_disconnect(client, tmp_path) -> None:
    connection_id = _connect_sqlite(client, tmp_path)

    created = _query(
        client,
        connection_id,
        "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, age INTEGER);"
        "INSERT INTO users (name, age) VALUES ('Ann', 30);",
    )
    assert created.json()["results"]["message"] == "Multiple statements executed successfully."

    updated = _query(client, connection_id, "UPDATE users SET age=31 WHERE id=1;")
    results = updated.json()["results"]
    assert results["rowCount"] == 1
    assert results["isMutating"] is True
    assert results["columns"] == ["id", "name", "age"]
    assert results["rows"] == [[1, "Ann", 31]]
    assert updated.json()["executionTime"] >= 0

    multi = _query(client, connection_id, "SELECT name FROM users; SELECT age FROM users;")
    assert [rs["rows"] for rs in multi.json()["results"]["resultSets"]] == [[["Ann"]], [[31]]]

    schema = client.get(f"/api/v1/db/schema/{connection_id}").json()
    assert schema["success"] is True
    assert schema["schema"]["tables"][0]["name"] == "users"
    assert schema["schema"]["tables"][0]["columns"][0]["primaryKey"] is True

    disconnected = client.post(f"/api/v1/db/disconnect/{connection_id}")
    assert disconnected.json() == {"success": True, "message": "Disconnected successfully"}

    after = _query(client, connection_id, "SELECT 1")
    assert after.status_code == 404
    assert after.json() == {"success": False, "error": "Database connection not found or not connected"}


def test_query_syntax_error_is_bad_request(client, tmp_path) -> None:
    connection_id = _connect_sqlite(client, tmp_path)

    response = _query(client, connection_id, "SELEC 1")

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unsupported_engine(client) -> None:
    response = client.post("/api/v1/db/connect", json={"type": "oracle"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Unsupported database type: oracle")


def test_server_engine_requires_fields(client) -> None:
    response = client.post("/api/v1/db/connect", json={"type": "postgres", "host": "localhost"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Missing required fields: host, database, username"}


def test_validation_errors_render_as_bad_request(client) -> None:
    response = client.post("/api/v1/db/query", json={"connectionId": "db_1"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_unknown_connection_disconnect_is_not_found(client) -> None:
    response = client.post("/api/v1/db/disconnect/db_missing")

    assert response.status_code == 404


def test_assist_fallback_without_key(client) -> None:
    response = client.post("/api/v1/ai/assist", json={"query": "list users", "action": "generate"})

    assert response.status_code == 200
    assert response.json()["query"] == "SELECT * FROM users LIMIT 10;"


def test_assist_uses_configured_llm(client, tmp_path) -> None:
    connection_id = _connect_sqlite(client, tmp_path)
    _query(client, connection_id, "CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
    _query(client, connection_id, "INSERT INTO users (name) VALUES ('Ann')")

    with container.llm.override(providers.Object(DummyLLM("```sql\nSELECT * FROM users;\n```"))):
        response = client.post(
            "/api/v1/ai/assist",
            json={"query": "all users", "action": "generate", "connectionId": connection_id},
        )

    body = response.json()
    assert body["success"] is True
    assert body["query"] == "SELECT * FROM users;"
    assert body["queries"] == ["SELECT * FROM users;"]
    assert body["response"].endswith("Found 1 record(s).")
