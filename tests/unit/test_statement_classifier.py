import pytest

from sqlbridge.connectors.statements import (
    ExecutionPlan,
    build_refetch_query,
    classify,
    parse_update_target,
    split_statements,
)


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("SELECT * FROM users;", ExecutionPlan.SINGLE_READ),
        ("  select id from users  ", ExecutionPlan.SINGLE_READ),
        ("SELECT 1; SELECT 2;", ExecutionPlan.MULTI_READ),
        ("select 1;\nSELECT 2;\n\nselect 3", ExecutionPlan.MULTI_READ),
        ("INSERT INTO users (name) VALUES ('a'); UPDATE users SET name='b';", ExecutionPlan.BATCH),
        ("SELECT 1; DELETE FROM users;", ExecutionPlan.BATCH),
        ("UPDATE users SET age = 31 WHERE id = 1;", ExecutionPlan.SINGLE_MUTATE),
        ("CREATE TABLE t (id INTEGER)", ExecutionPlan.SINGLE_MUTATE),
        ("WITH t AS (SELECT 1) SELECT * FROM t;", ExecutionPlan.SINGLE_MUTATE),
    ],
)
def test_classify_selects_plan(sql: str, expected: ExecutionPlan) -> None:
    assert classify(sql).plan is expected


def test_trailing_terminators_do_not_make_a_batch() -> None:
    plan = classify("SELECT 1;;  ;")
    assert plan.statements == ("SELECT 1",)
    assert plan.plan is ExecutionPlan.SINGLE_READ


def test_classification_is_deterministic() -> None:
    text = "INSERT INTO t VALUES (1); SELECT * FROM t;"
    assert classify(text) == classify(text)


def test_split_statements_drops_empty_segments() -> None:
    assert split_statements(" ; SELECT 1 ;\n; SELECT 2; ") == ["SELECT 1", "SELECT 2"]


def test_plan_flags() -> None:
    plan = classify("insert into users (name) values ('x')")
    assert plan.is_insert
    assert plan.is_mutating
    assert not plan.is_select
    assert not classify("SELECT 1").is_mutating
    assert classify("SELECT 1; UPDATE t SET a=1").is_mutating


def test_parse_update_target_captures_where_clause() -> None:
    assert parse_update_target("UPDATE users SET age=31 WHERE id=1;") == ("users", "id=1")


def test_parse_update_target_defaults_to_all_rows() -> None:
    assert parse_update_target("update users set active = 0") == ("users", "1=1")


def test_build_refetch_query() -> None:
    sql = "UPDATE users\nSET name = 'Alex', age = 40\nWHERE name LIKE 'J%';"
    assert build_refetch_query(sql) == "SELECT * FROM users WHERE name LIKE 'J%'"
    assert build_refetch_query("DELETE FROM users") is None


def test_terminators_inside_literals_do_not_split() -> None:
    plan = classify("SELECT 'a;b'")
    assert plan.plan is ExecutionPlan.SINGLE_READ
    assert plan.statements == ("SELECT 'a;b'",)
    assert split_statements("SELECT 'x;y' AS v; SELECT 2") == ["SELECT 'x;y' AS v", "SELECT 2"]
    assert split_statements('SELECT "odd;name" FROM t; SELECT 3') == ['SELECT "odd;name" FROM t', "SELECT 3"]


def test_unterminated_literal_falls_back_to_plain_split() -> None:
    assert split_statements("SELECT 'open; SELECT 2") == ["SELECT 'open", "SELECT 2"]


def test_parse_update_target_ignores_keywords_inside_literals() -> None:
    sql = "UPDATE users SET note = 'see WHERE clause' WHERE id = 1;"
    assert parse_update_target(sql) == ("users", "id = 1")
    assert build_refetch_query(sql) == "SELECT * FROM users WHERE id = 1"


def test_parse_update_target_skips_subquery_where() -> None:
    sql = "UPDATE orders SET total = (SELECT SUM(x) FROM items WHERE items.o = 1) WHERE id = 1"
    assert parse_update_target(sql) == ("orders", "id = 1")
