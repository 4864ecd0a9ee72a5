from __future__ import annotations

from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.entities import Gym

from .base import BaseService


class GymService(BaseService[Gym]):
    """CRUD for gyms of the caller's organization."""

    table_name = TableNames.GYM
    entity_type = Gym
    updatable_fields = frozenset({"Name", "Address", "Phone", "Email", "Description", "IsActive"})
    search_fields = ("Name", "Email", "Address")
