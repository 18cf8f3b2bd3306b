"""
迁移执行器测试
"""

from pathlib import Path

from ghostroute.services.migration_runner import MigrationRunner, discover, split_statements


def test_split_statements_respects_quotes_and_comments():
    sql = """
    -- header; with a semicolon
    CREATE TABLE a (x TEXT DEFAULT 'semi;colon');
    INSERT INTO a VALUES ('it''s; fine');  -- trailing; comment
    CREATE TABLE "we;ird" (y INTEGER)
    """
    assert split_statements(sql) == [
        "CREATE TABLE a (x TEXT DEFAULT 'semi;colon')",
        "INSERT INTO a VALUES ('it''s; fine')",
        'CREATE TABLE "we;ird" (y INTEGER)',
    ]


def test_discover_sorts_by_file_name(tmp_path):
    for name in ("010_c.sql", "002_b.sql", "001_a.sql", "notes.txt"):
        (tmp_path / name).write_text("SELECT 1;", encoding="utf-8")

    assert [p.name for p in discover(tmp_path)] == ["001_a.sql", "002_b.sql", "010_c.sql"]
    assert discover(tmp_path / "missing") == []


async def test_failed_script_does_not_stop_later_ones(db, tmp_path):
    directory = tmp_path / "migrations"
    directory.mkdir()
    (directory / "001_create.sql").write_text(
        "CREATE TABLE IF NOT EXISTS notes (id INTEGER PRIMARY KEY, body TEXT);\n"
        "INSERT INTO notes (body) VALUES ('first');\n",
        encoding="utf-8",
    )
    (directory / "002_broken.sql").write_text(
        "INSERT INTO notes (body) VALUES ('rolled back');\nSELECT * FROM no_such_table;\n",
        encoding="utf-8",
    )
    (directory / "003_more.sql").write_text("INSERT INTO notes (body) VALUES ('third');", encoding="utf-8")

    results = await MigrationRunner(db, str(directory)).run()

    assert [(r.name, r.ok) for r in results] == [
        ("001_create.sql", True),
        ("002_broken.sql", False),
        ("003_more.sql", True),
    ]
    assert results[0].statements == 2
    assert "no_such_table" in results[1].error

    async with db.session() as session:
        conn = await session.connection()
        rows = (await conn.exec_driver_sql("SELECT body FROM notes ORDER BY id")).fetchall()
    assert [r[0] for r in rows] == ["first", "third"]


async def test_empty_directory(db, tmp_path):
    assert await MigrationRunner(db, str(tmp_path)).run() == []


def test_shipped_migrations_are_ordered():
    directory = Path(__file__).parent.parent / "migrations"
    names = [p.name for p in discover(directory)]

    assert names == sorted(names)
    assert names[0].startswith("001_")
    for path in discover(directory):
        assert split_statements(path.read_text(encoding="utf-8"))
