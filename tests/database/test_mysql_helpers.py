from __future__ import annotations

import pytest

from geo_attendance.database.bootstrap import iter_sql_statements
from geo_attendance.database.mysql_base import dump_json, load_json


def test_sql_splitter_handles_quotes_and_comments():
    sql = """
    -- leading comment; with semicolon
    CREATE TABLE a (x INT);
    INSERT INTO a VALUES ('semi;colon'); -- trailing
    INSERT INTO a VALUES ("dq;uote")
    """

    statements = list(iter_sql_statements(sql))

    assert statements == [
        "CREATE TABLE a (x INT)",
        "INSERT INTO a VALUES ('semi;colon')",
        'INSERT INTO a VALUES ("dq;uote")',
    ]


def test_json_column_values_are_normalized():
    payload = {"user_agent": "pytest", "platform": "Linux"}

    assert load_json(dump_json(payload)) == payload
    assert load_json(dump_json(payload).encode("utf-8")) == payload
    assert load_json(payload) is payload
    assert load_json(None) == {}
    assert load_json("") == {}
    assert load_json("[1, 2]") == {"value": [1, 2]}


def test_unsupported_json_value_type():
    with pytest.raises(TypeError):
        load_json(3.5)
