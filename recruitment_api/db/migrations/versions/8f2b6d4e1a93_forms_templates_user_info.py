"""Form builder, email templates and user profiles.

- UserInfo (one profile per user)
- FormTemplate -> FormSection -> FormField
- OptionGroup -> Options (choices referenced by FormField.OptionGroupId)
- EmailTemplate
"""

from typing import List, Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8f2b6d4e1a93"
down_revision: Union[str, None] = "3c1d9e7a5b20"
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


def _fk(table: str, column: str, target: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint([column], [f"{target}.Uid"], name=f"fk_{table}_{column}_{target}")


def upgrade() -> None:
    _tenant_table(
        "UserInfo",
        sa.Column("UserId", UID, nullable=False),
        sa.Column("Email", sa.String(255), nullable=True),
        sa.Column("FirstName", sa.String(100), nullable=True),
        sa.Column("LastName", sa.String(100), nullable=True),
        sa.Column("Phone", sa.String(50), nullable=True),
        sa.Column("JoiningDate", sa.DateTime(), nullable=True),
        sa.Column("DateOfBirth", sa.DateTime(), nullable=True),
        sa.Column("Address", sa.Text(), nullable=True),
        sa.Column("Gender", sa.String(20), nullable=True),
        sa.Column("ProfileUrl", sa.String(500), nullable=True),
        constraints=[_fk("UserInfo", "UserId", "Users")],
    )
    op.create_index("ix_UserInfo_UserId", "UserInfo", ["UserId"])

    _tenant_table(
        "FormTemplate",
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
        sa.Column("TemplateType", sa.String(20), server_default="Application", nullable=False),
    )

    _tenant_table(
        "FormSection",
        sa.Column("FormTemplateId", UID, nullable=False),
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
        sa.Column("ShowTitle", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("SortOrder", sa.Integer(), server_default="0", nullable=False),
        constraints=[_fk("FormSection", "FormTemplateId", "FormTemplate")],
    )
    op.create_index("ix_FormSection_FormTemplateId", "FormSection", ["FormTemplateId"])

    _tenant_table(
        "OptionGroup",
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
    )

    _tenant_table(
        "Options",
        sa.Column("OptionGroupId", UID, nullable=False),
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Value", sa.String(255), nullable=True),
        sa.Column("SortOrder", sa.Integer(), server_default="0", nullable=False),
        constraints=[_fk("Options", "OptionGroupId", "OptionGroup")],
    )
    op.create_index("ix_Options_OptionGroupId", "Options", ["OptionGroupId"])

    _tenant_table(
        "FormField",
        sa.Column("FormSectionId", UID, nullable=False),
        sa.Column("Label", sa.String(255), nullable=False),
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Placeholder", sa.String(255), nullable=True),
        sa.Column("Type", sa.String(20), server_default="text", nullable=False),
        sa.Column("OptionGroupId", UID, nullable=True),
        sa.Column("HelpText", sa.Text(), nullable=True),
        sa.Column("IsRequired", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("DefaultValue", sa.String(255), nullable=True),
        sa.Column("MinLength", sa.Integer(), nullable=True),
        sa.Column("MaxLength", sa.Integer(), nullable=True),
        sa.Column("Pattern", sa.String(255), nullable=True),
        sa.Column("SortOrder", sa.Integer(), server_default="0", nullable=False),
        sa.Column("IsVisible", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("Width", sa.Integer(), server_default="100", nullable=False),
        constraints=[
            _fk("FormField", "FormSectionId", "FormSection"),
            _fk("FormField", "OptionGroupId", "OptionGroup"),
        ],
    )
    op.create_index("ix_FormField_FormSectionId", "FormField", ["FormSectionId"])
    op.create_index("ix_FormField_OptionGroupId", "FormField", ["OptionGroupId"])

    _tenant_table(
        "EmailTemplate",
        sa.Column("Name", sa.String(255), nullable=False),
        sa.Column("Description", sa.Text(), nullable=True),
        sa.Column("Content", sa.Text(), nullable=True),
        sa.Column("Type", sa.String(30), server_default="Test", nullable=False),
    )


def downgrade() -> None:
    for name in ("EmailTemplate", "FormField", "Options", "OptionGroup", "FormSection", "FormTemplate", "UserInfo"):
        op.drop_table(name)
