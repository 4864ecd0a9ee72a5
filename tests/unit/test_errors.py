import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from recruitment_api.core.errors import (
    AppError,
    DatabaseError,
    DuplicateEntryError,
    EmptyBatchError,
    ErrorCode,
    ForeignKeyConstraintError,
    NotFoundError,
    ValidationError,
)
from recruitment_api.db.query_executor import bind_positional, translate_db_error


class _MySQLError(Exception):
    """Mimics a driver error carrying (errno, message) args."""


def _wrap(orig, cls=IntegrityError):
    return cls("INSERT ...", {}, orig)


def test_app_error_defaults_and_details():
    err = NotFoundError("Gym not found", details={"Uid": "g1"})
    assert err.status_code == 404
    assert err.code is ErrorCode.RECORD_NOT_FOUND
    assert err.message == "Gym not found"
    assert err.details == {"Uid": "g1"}
    assert str(err) == "Gym not found"


def test_default_message_comes_from_code():
    assert DuplicateEntryError().message.startswith("This record already exists")
    assert AppError().details is None


def test_empty_batch_is_a_validation_error():
    err = EmptyBatchError()
    assert isinstance(err, ValidationError)
    assert err.status_code == 400
    assert err.code is ErrorCode.EMPTY_BATCH


def test_status_override():
    assert ForeignKeyConstraintError(status_code=409).status_code == 409
    assert ForeignKeyConstraintError().status_code == 400


@pytest.mark.parametrize(
    "errno, expected_type, status",
    [
        (1062, DuplicateEntryError, 409),
        (1452, ForeignKeyConstraintError, 400),
        (1216, ForeignKeyConstraintError, 400),
        (1451, ForeignKeyConstraintError, 409),
        (1217, ForeignKeyConstraintError, 409),
        (1205, DatabaseError, 500),
    ],
)
def test_translate_mysql_errors(errno, expected_type, status):
    err = translate_db_error(_wrap(_MySQLError(errno, "boom")))
    assert type(err) is expected_type
    assert err.status_code == status


def test_translate_sqlite_unique():
    err = translate_db_error(_wrap(sqlite3.IntegrityError("UNIQUE constraint failed: Users.Email")))
    assert isinstance(err, DuplicateEntryError)


def test_translate_sqlite_foreign_key_depends_on_statement():
    orig = sqlite3.IntegrityError("FOREIGN KEY constraint failed")
    assert translate_db_error(_wrap(orig), "INSERT INTO Positions ...").status_code == 400
    assert translate_db_error(_wrap(orig), "  delete FROM Department WHERE Uid = ?").status_code == 409


def test_translate_not_null_violations_to_validation_errors():
    err = translate_db_error(_wrap(sqlite3.IntegrityError("NOT NULL constraint failed: Gym.Name")))
    assert type(err) is ValidationError
    assert err.status_code == 400
    assert err.message == "Name is required"
    assert err.details == {"Name": "cannot be null"}

    err = translate_db_error(_wrap(_MySQLError(1048, "Column 'Email' cannot be null")))
    assert type(err) is ValidationError
    assert err.message == "Email is required"


def test_translate_unknown_error_hides_driver_message():
    err = translate_db_error(_wrap(sqlite3.OperationalError("disk I/O error"), OperationalError))
    assert isinstance(err, DatabaseError)
    assert "disk" not in err.message


def test_bind_positional_rewrites_placeholders():
    statement = bind_positional("SELECT * FROM Gym WHERE Uid = ? AND OrgId = ?", ["g1", "o1"])
    assert str(statement) == "SELECT * FROM Gym WHERE Uid = :p0 AND OrgId = :p1"
    assert statement.compile().params == {"p0": "g1", "p1": "o1"}


def test_bind_positional_rejects_count_mismatch():
    with pytest.raises(ValueError):
        bind_positional("SELECT * FROM Gym WHERE Uid = ?", [])
    with pytest.raises(ValueError):
        bind_positional("SELECT 1", ["extra"])
