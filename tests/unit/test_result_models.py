from datetime import date
from decimal import Decimal

from sqlbridge.config import Settings, parse_cors
from sqlbridge.connectors import ColumnSchema, QueryResult, SchemaInfo, TableSchema, schema_text
from sqlbridge.connectors.base import request_response_result, unique_columns


def test_json_safe_uses_wire_field_names():
    result = QueryResult(
        columns=["id", "born", "balance", "blob"],
        rows=[[1, date(1990, 5, 17), Decimal("10.50"), b"\x01\x02"]],
        row_count=1,
        execution_time_ms=1.25,
    )

    payload = result.json_safe()

    assert payload == {
        "columns": ["id", "born", "balance", "blob"],
        "rows": [[1, "1990-05-17", "10.50", "0102"]],
        "rowCount": 1,
        "executionTimeMs": 1.25,
        "isMutating": False,
        "lastInsertId": None,
        "message": None,
    }


def test_unique_columns_skips_taken_suffixes():
    assert unique_columns(["id", "id", "id_1", "name"]) == ["id", "id_1", "id_1_1", "name"]


def test_request_response_result_for_write_without_result_set():
    result = request_response_result(
        field_names=None,
        rows=[],
        affected_rows=-1,
        batch=False,
        is_mutating=True,
        start=0.0,
        sql="CREATE TABLE t (id INT)",
    )

    assert result.row_count == 0
    assert result.columns == []
    assert result.is_mutating


def test_request_response_result_for_read_without_rows_drops_descriptors():
    result = request_response_result(
        field_names=["id", "email"],
        rows=[],
        affected_rows=0,
        batch=False,
        is_mutating=False,
        start=0.0,
        sql="SELECT id, email FROM users WHERE 1=0",
    )

    assert result.columns == []
    assert result.rows == []
    assert result.row_count == 0
    assert result.json_safe()["columns"] == []


def test_schema_text_renders_prompt_form():
    schema = SchemaInfo(
        tables=[
            TableSchema(
                name="users",
                columns=[
                    ColumnSchema(name="id", type="INTEGER", primary_key=True, nullable=False),
                    ColumnSchema(name="email", type="TEXT"),
                ],
            )
        ]
    )

    assert schema_text(schema) == (
        "Table: users\n"
        "Columns:\n"
        "  - id (INTEGER) [PRIMARY KEY] [NOT NULL]\n"
        "  - email (TEXT)\n"
    )
    assert schema.to_dict()["tables"][0]["columns"][0] == {
        "name": "id",
        "type": "INTEGER",
        "primaryKey": True,
        "nullable": False,
    }


def test_settings_cors_and_llm_flags():
    settings = Settings(CORS_ORIGIN="http://a.test, http://b.test", OPENROUTER_API_KEY="")

    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert not settings.llm_enabled
    assert parse_cors("*") == "*"
    assert Settings(OPENROUTER_API_KEY="sk-test").llm_enabled
