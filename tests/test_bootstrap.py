from attendtrack.database.bootstrap import SCHEMA_PATH, _iter_sql_statements, _strip_create_db_and_use


def test_splitter_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");\nSELECT 1"
    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_strip_create_database_use_and_comments():
    sql = "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\n-- note; here\nCREATE TABLE a (id INT);"
    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE a (id INT)"]


def test_schema_defines_all_tables():
    statements = list(_iter_sql_statements(_strip_create_db_and_use(SCHEMA_PATH.read_text(encoding="utf-8"))))
    joined = "\n".join(statements)
    for table in ("users", "profiles", "user_roles", "courses", "attendance_records"):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in joined
