from __future__ import annotations

from recruitment_api.schemas.entities import Gym
from recruitment_api.schemas.gyms import GymCreate, GymUpdate
from recruitment_api.services.gyms import GymService

from .crud import build_crud_router

router = build_crud_router(
    prefix="/gyms",
    tags=["Gyms"],
    label="Gym",
    service_cls=GymService,
    create_model=GymCreate,
    update_model=GymUpdate,
    read_model=Gym,
)
