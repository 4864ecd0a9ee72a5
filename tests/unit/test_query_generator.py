from datetime import datetime

import pytest

from recruitment_api.core.errors import EmptyBatchError, ValidationError
from recruitment_api.db.query_generator import QueryGenerator, defined_values, validate_identifier
from recruitment_api.db.tables import columns_for, hidden_columns_for
from recruitment_api.schemas.common import Filter
from recruitment_api.schemas.entities import Gym


@pytest.fixture
def gyms():
    return QueryGenerator("Gym", dialect="mysql", allowed_columns=columns_for("Gym"))


def test_select_by_id_is_tenant_scoped_and_hides_deleted(gyms):
    sql, params = gyms.select_by_id("g1", "o1")
    assert sql == "SELECT * FROM Gym WHERE Uid = ? AND OrgId = ? AND IsDeleted = 0"
    assert params == ["g1", "o1"]


def test_select_all_without_filters_has_no_order_or_limit(gyms):
    sql, params = gyms.select_all("o1")
    assert sql == "SELECT * FROM Gym WHERE IsDeleted = 0 AND OrgId = ?"
    assert params == ["o1"]


def test_select_all_with_projection_sort_and_pagination(gyms):
    filters = Filter(page=2, page_size=10, sort_by="Name", sort_order="asc")
    sql, params = gyms.select_all("o1", columns=["Uid", "Name"], filters=filters)
    assert sql == (
        "SELECT Uid, Name FROM Gym WHERE IsDeleted = 0 AND OrgId = ? ORDER BY Name ASC LIMIT ? OFFSET ?"
    )
    assert params == ["o1", 10, 10]


def test_select_all_sort_without_pagination(gyms):
    sql, params = gyms.select_all("o1", filters=Filter(sort_by="Name"))
    assert sql.endswith("ORDER BY Name DESC")
    assert params == ["o1"]


def test_unknown_or_unsafe_columns_are_rejected(gyms):
    with pytest.raises(ValidationError):
        gyms.select_all("o1", columns=["Salary"])
    with pytest.raises(ValidationError):
        gyms.select_all("o1", filters=Filter(sort_by="Name; DROP TABLE Gym"))
    with pytest.raises(ValidationError):
        validate_identifier("1abc")


def test_invalid_sort_order_is_rejected(gyms):
    with pytest.raises(ValidationError):
        gyms.select_all("o1", filters=Filter(sort_by="Name", sort_order="sideways"))


def test_select_list_shares_where_clause_between_rows_and_count(gyms):
    rows, total = gyms.select_list("o1", search_fields=("Name", "Email"), keyword="fit")
    assert rows.sql == (
        "SELECT * FROM Gym WHERE IsDeleted = 0 AND OrgId = ? AND (Name LIKE ? OR Email LIKE ?) "
        "ORDER BY CreatedOn DESC"
    )
    assert total.sql == (
        "SELECT COUNT(*) AS total FROM Gym WHERE IsDeleted = 0 AND OrgId = ? AND (Name LIKE ? OR Email LIKE ?)"
    )
    assert rows.params == total.params == ["o1", "%fit%", "%fit%"]


def test_select_where_supports_in_lists_and_null():
    positions = QueryGenerator("Positions", allowed_columns=columns_for("Positions"))
    sql, params = positions.select_where({"Status": ["Open", "Draft"], "DepartmentId": None}, org_id="o1")
    assert sql == (
        "SELECT * FROM Positions WHERE IsDeleted = 0 AND OrgId = ? AND Status IN (?, ?) AND DepartmentId IS NULL"
    )
    assert params == ["o1", "Open", "Draft"]


def test_exists_and_count(gyms):
    assert gyms.exists("g1", "o1").sql == (
        "SELECT 1 AS found FROM Gym WHERE Uid = ? AND OrgId = ? AND IsDeleted = 0 LIMIT 1"
    )
    assert gyms.count("o1") == ("SELECT COUNT(*) AS total FROM Gym WHERE IsDeleted = 0 AND OrgId = ?", ["o1"])


def test_insert_uses_only_defined_fields_including_explicit_none(gyms):
    sql, params = gyms.insert(Gym(Uid="g1", Name="Downtown", Description=None))
    assert sql == "INSERT INTO Gym (Uid, Name, Description) VALUES (?, ?, ?)"
    assert params == ["g1", "Downtown", None]


def test_defined_values_ignores_unset_fields():
    assert defined_values(Gym(Name="A")) == {"Name": "A"}
    assert defined_values({"Name": "A", "Phone": None}) == {"Name": "A", "Phone": None}


def test_update_never_writes_uid(gyms):
    sql, params = gyms.update("g1", {"Uid": "other", "Name": "B"})
    assert sql == "UPDATE Gym SET Name = ? WHERE Uid = ? AND IsDeleted = 0"
    assert params == ["B", "g1"]
    with pytest.raises(ValidationError, match="No fields to update"):
        gyms.update("g1", {"Uid": "g1"})


def test_update_is_tenant_scoped_and_skips_audit_columns(gyms):
    row = {
        "Uid": "g1",
        "OrgId": "org-b",
        "Name": "B",
        "CreatedOn": "2024-01-01",
        "CreatedBy": "u1",
        "IsDeleted": False,
        "DeletedOn": None,
        "DeletedBy": None,
        "UpdatedBy": "u2",
    }
    sql, params = gyms.update("g1", row, org_id="org-a")
    assert sql == "UPDATE Gym SET Name = ?, UpdatedBy = ? WHERE Uid = ? AND IsDeleted = 0 AND OrgId = ?"
    assert params == ["B", "u2", "g1", "org-a"]


def test_insert_many_builds_one_group_per_row(gyms):
    sql, params = gyms.insert_many([{"Uid": "a", "Name": "A"}, {"Uid": "b", "Name": "B"}])
    assert sql == "INSERT INTO Gym (Uid, Name) VALUES (?, ?), (?, ?)"
    assert params == ["a", "A", "b", "B"]


def test_batch_builders_reject_empty_input(gyms):
    with pytest.raises(EmptyBatchError):
        gyms.insert_many([])
    with pytest.raises(EmptyBatchError):
        gyms.upsert_many([])
    with pytest.raises(EmptyBatchError):
        gyms.hard_delete_many([])
    with pytest.raises(EmptyBatchError):
        gyms.soft_delete_many([], datetime(2024, 1, 1))


def test_update_many_uses_case_per_field(gyms):
    sql, params = gyms.update_many(
        [{"Uid": "a", "Name": "A"}, {"Uid": "b", "Name": "B", "Phone": "555"}]
    )
    assert sql == (
        "UPDATE Gym SET Name = CASE WHEN Uid = ? THEN ? WHEN Uid = ? THEN ? ELSE Name END, "
        "Phone = CASE WHEN Uid = ? THEN ? ELSE Phone END WHERE Uid IN (?, ?)"
    )
    assert params == ["a", "A", "b", "B", "b", "555", "a", "b"]


def test_update_many_requires_uid_on_every_row(gyms):
    with pytest.raises(ValidationError):
        gyms.update_many([{"Uid": "a", "Name": "A"}, {"Name": "B"}])


def test_upsert_mysql_skips_key_and_creation_audit():
    gen = QueryGenerator("Gym", dialect="mysql", allowed_columns=columns_for("Gym"))
    sql, params = gen.upsert_many([{"Uid": "a", "Name": "A", "CreatedBy": "u1"}])
    assert sql == "INSERT INTO Gym (Uid, Name, CreatedBy) VALUES (?, ?, ?) ON DUPLICATE KEY UPDATE Name = VALUES(Name)"
    assert params == ["a", "A", "u1"]


def test_upsert_sqlite_uses_on_conflict():
    gen = QueryGenerator("Gym", dialect="sqlite", allowed_columns=columns_for("Gym"))
    sql, _ = gen.upsert_many([{"Uid": "a", "Name": "A", "CreatedOn": datetime(2024, 1, 1)}])
    assert sql.endswith("ON CONFLICT(Uid) DO UPDATE SET Name = excluded.Name")


def test_upsert_with_nothing_to_update_is_a_no_op_on_conflict():
    mysql = QueryGenerator("Gym", dialect="mysql")
    sqlite = QueryGenerator("Gym", dialect="sqlite")
    rows = [{"Uid": "a", "CreatedOn": datetime(2024, 1, 1)}]
    assert mysql.upsert_many(rows).sql.endswith("ON DUPLICATE KEY UPDATE Uid = Uid")
    assert sqlite.upsert_many(rows).sql.endswith("ON CONFLICT(Uid) DO NOTHING")


def test_soft_delete_stamps_deletion_and_only_hits_live_rows(gyms):
    ts = datetime(2024, 5, 1, 12, 0)
    sql, params = gyms.soft_delete("g1", ts, "u1", "o1")
    assert sql == (
        "UPDATE Gym SET IsDeleted = 1, DeletedOn = ?, DeletedBy = ? WHERE Uid = ? AND IsDeleted = 0 AND OrgId = ?"
    )
    assert params == [ts, "u1", "g1", "o1"]


def test_hard_delete_with_and_without_tenant(gyms):
    assert gyms.hard_delete("g1") == ("DELETE FROM Gym WHERE Uid = ?", ["g1"])
    assert gyms.hard_delete_many(["a", "b"], "o1") == (
        "DELETE FROM Gym WHERE Uid IN (?, ?) AND OrgId = ?",
        ["a", "b", "o1"],
    )


def test_unsupported_dialect():
    with pytest.raises(ValueError):
        QueryGenerator("Gym", dialect="oracle")


def test_password_is_writable_but_never_sortable_or_searchable():
    users = QueryGenerator(
        "Users",
        dialect="mysql",
        allowed_columns=columns_for("Users"),
        hidden_columns=hidden_columns_for("Users"),
    )
    with pytest.raises(ValidationError, match="Unknown column 'Password'"):
        users.select_list("o1", sort_by="Password")
    with pytest.raises(ValidationError, match="Unknown column 'Password'"):
        users.search_clause(["Email", "Password"], "abc")
    with pytest.raises(ValidationError, match="Unknown column 'Password'"):
        users.select_where({"Password": "hash"})
    with pytest.raises(ValidationError, match="Unknown column 'Password'"):
        users.select_by_id("u1", "o1", columns=["Password"])

    sql, _ = users.insert({"Uid": "u1", "Email": "a@b.io", "Password": "hash"})
    assert sql == "INSERT INTO Users (Uid, Email, Password) VALUES (?, ?, ?)"
    sql, _ = users.update("u1", {"Password": "hash2"}, org_id="o1")
    assert sql == "UPDATE Users SET Password = ? WHERE Uid = ? AND IsDeleted = 0 AND OrgId = ?"


def test_select_where_orders_ascending_by_requested_columns():
    sections = QueryGenerator("FormSection", allowed_columns=columns_for("FormSection"))
    sql, params = sections.select_where({"FormTemplateId": "t1"}, org_id="o1", order_by=("SortOrder", "Name"))
    assert sql == (
        "SELECT * FROM FormSection WHERE IsDeleted = 0 AND OrgId = ? AND FormTemplateId = ? "
        "ORDER BY SortOrder ASC, Name ASC"
    )
    assert params == ["o1", "t1"]
