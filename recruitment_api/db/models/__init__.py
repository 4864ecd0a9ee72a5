"""
ORM table definitions for the organization, security, gym, task,
recruitment, form and email-template domains, plus the seeder bookkeeping
table.

Importing this package ensures every table is registered with the Base
metadata, which backs Alembic, schema creation and the column allow-lists
used by the query generator.
"""

from .organization import Organization  # noqa: F401
from .security import User, UserInfo  # noqa: F401
from .gym import Gym  # noqa: F401
from .task import Task  # noqa: F401
from .recruitment import (  # noqa: F401
    Application,
    Department,
    Position,
)
from .forms import (  # noqa: F401
    FormField,
    FormSection,
    FormTemplate,
    Option,
    OptionGroup,
)
from .email_template import EmailTemplate  # noqa: F401
from .seeds import SeedRecord  # noqa: F401
