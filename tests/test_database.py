"""Tests for the SQLite Database wrapper."""

import pytest

from wildebeest.errors import Conflict, WildebeestError
from wildebeest.storage.database import Database


@pytest.fixture
def database(tmp_path):
    db = Database(tmp_path / "test.db")
    yield db
    db.close()


def _insert_client(db, client_id="c1"):
    db.execute(
        "INSERT INTO clients (id, name, redirect_uri, scopes, secret, created_at)"
        " VALUES (?, 'n', 'x://y', 'read', 's', 0)",
        (client_id,),
    )


def test_execute_returning_gives_written_row(database):
    _insert_client(database)
    row = database.execute_returning(
        "UPDATE clients SET name = ? WHERE id = ? RETURNING id, name",
        ("renamed", "c1"),
    )
    assert row["id"] == "c1"
    assert row["name"] == "renamed"


def test_execute_returning_without_row_raises(database):
    with pytest.raises(WildebeestError):
        database.execute_returning(
            "UPDATE clients SET name = 'x' WHERE id = ? RETURNING id",
            ("missing",),
        )


def test_duplicate_key_raises_conflict(database):
    _insert_client(database)
    with pytest.raises(Conflict):
        _insert_client(database)
    assert database.fetch_one("SELECT count(*) AS count FROM clients")["count"] == 1


def test_failed_transaction_rolls_back(database):
    with pytest.raises(RuntimeError):
        with database.transaction():
            _insert_client(database)
            raise RuntimeError("boom")
    assert database.fetch_all("SELECT id FROM clients") == []
