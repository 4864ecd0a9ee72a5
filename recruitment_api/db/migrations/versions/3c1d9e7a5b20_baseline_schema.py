"""Baseline schema for the recruitment platform.

- Organization (tenant root)
- Users
- Gym
- Department
- Positions
- Application
- Task
- _seeds (seeder bookkeeping)

Every entity table carries the audit columns (Uid, IsActive, IsDeleted,
Created/Updated/Deleted On/By); tenant tables reference Organization.Uid.
"""

from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1d9e7a5b20"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UID = sa.String(36)


def _audit_columns() -> List[sa.Column]:
    return [
        sa.Column("Uid", UID, nullable=False),
        sa.Column("IsActive", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("IsDeleted", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("CreatedOn", sa.DateTime(), nullable=False),
        sa.Column("CreatedBy", UID, nullable=True),
        sa.Column("UpdatedOn", sa.DateTime(), nullable=True),
        sa.Column("UpdatedBy", UID, nullable=True),
        sa.Column("DeletedOn", sa.DateTime(), nullable=True),
        sa.Column("DeletedBy", UID, nullable=True),
    ]


def _tenant_table(name: str, *columns, constraints: Sequence[sa.Constraint] = ()) -> None:
    op.create_table(
        name,
        sa.Column("OrgId", UID, nullable=False),
        *columns,
        *_audit_columns(),
        sa.PrimaryKeyConstraint("Uid", name=f"pk_{name}"),
        sa.ForeignKeyConstraint(["OrgId"], ["Organization.Uid"], name=f"fk_{name}_OrgId_Organization"),
        *constraints,
    )
    op.create_index(f"ix_{name}_OrgId", name, ["OrgId"])


def upgrade() -> None:
    # Organization: OrgId mirrors Uid
    op.create_table(
        "Organization",
        sa.Column("OrgId", UID, nullable=False),
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
        sa.Column("LogoUrl", sa.String(500), nullable=True),
        sa.Column("Phone", sa.String(50), nullable=True),
        sa.Column("Email", sa.String(255), nullable=True),
        sa.Column("Owner", sa.String(255), nullable=True),
        sa.Column("Address", sa.Text(), nullable=True),
        sa.Column("OrgSite", sa.String(255), nullable=True),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("Uid", name="pk_Organization"),
    )
    op.create_index("ix_Organization_OrgId", "Organization", ["OrgId"])

    _tenant_table(
        "Users",
        sa.Column("Email", sa.String(255), nullable=False),
        sa.Column("Password", sa.String(255), nullable=False),
        sa.Column("Role", sa.String(20), server_default="Employee", nullable=False),
        constraints=[sa.UniqueConstraint("Email", name="uq_Users_Email")],
    )

    _tenant_table(
        "Gym",
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Address", sa.Text(), nullable=True),
        sa.Column("Phone", sa.String(50), nullable=True),
        sa.Column("Email", sa.String(255), nullable=True),
        sa.Column("Description", sa.Text(), nullable=True),
    )

    _tenant_table(
        "Department",
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
    )

    _tenant_table(
        "Positions",
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
        sa.Column("Status", sa.String(20), server_default="Draft", nullable=False),
        sa.Column("DepartmentId", UID, nullable=True),
        constraints=[
            sa.ForeignKeyConstraint(["DepartmentId"], ["Department.Uid"], name="fk_Positions_DepartmentId_Department"),
        ],
    )
    op.create_index("ix_Positions_DepartmentId", "Positions", ["DepartmentId"])

    _tenant_table(
        "Application",
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Email", sa.String(255), nullable=False),
        sa.Column("Phone", sa.String(50), nullable=True),
        sa.Column("Experience", sa.Float(), nullable=True),
        sa.Column("PositionId", UID, nullable=True),
        sa.Column("ResumeUrl", sa.String(500), nullable=True),
        sa.Column("CurrentSalary", sa.Float(), nullable=True),
        sa.Column("ExpectedSalary", sa.Float(), nullable=True),
        sa.Column("NoticePeriod", sa.Integer(), nullable=True),
        sa.Column("MetaData", sa.Text(), nullable=True),
        constraints=[
            sa.ForeignKeyConstraint(["PositionId"], ["Positions.Uid"], name="fk_Application_PositionId_Positions"),
        ],
    )
    op.create_index("ix_Application_PositionId", "Application", ["PositionId"])

    _tenant_table(
        "Task",
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
        sa.Column("UserName", sa.String(255), nullable=True),
        sa.Column("Stack", sa.String(10), nullable=True),
        sa.Column("StartDate", sa.DateTime(), nullable=True),
        sa.Column("EndDate", sa.DateTime(), nullable=True),
        sa.Column("Status", sa.String(20), server_default="Active", nullable=False),
    )

    # Seeder bookkeeping
    op.create_table(
        "_seeds",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("batch", sa.Integer(), nullable=False),
        sa.Column("executed_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk__seeds"),
        sa.UniqueConstraint("name", name="uq__seeds_name"),
    )


def downgrade() -> None:
    op.drop_table("_seeds")
    for name in ("Task", "Application", "Positions", "Department", "Gym", "Users"):
        op.drop_table(name)
    op.drop_index("ix_Organization_OrgId", table_name="Organization")
    op.drop_table("Organization")
