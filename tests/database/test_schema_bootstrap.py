from __future__ import annotations

from pathlib import Path

from attendance_ledger.database.bootstrap import (
    _strip_create_db_and_use,
    _strip_line_comments,
    iter_sql_statements,
)

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_splitter_ignores_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES('a;b');\nINSERT INTO t VALUES(\"c;d\");  \n"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES('a;b')",
        'INSERT INTO t VALUES("c;d")',
    ]


def test_schema_defines_tables_and_open_session_guard():
    sql = _strip_line_comments(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8")))
    statements = list(iter_sql_statements(sql))

    created = [s.split("(")[0].split()[-1].strip("`") for s in statements if s.upper().startswith("CREATE TABLE")]
    assert created == ["users", "time_records", "change_requests"]
    assert not any(s.upper().startswith(("USE ", "CREATE DATABASE")) for s in statements)

    time_records = next(s for s in statements if "time_records" in s.split("(")[0])
    assert "open_marker" in time_records
    assert "uq_time_records_open" in time_records
