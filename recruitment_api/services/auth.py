from __future__ import annotations

import logging
from uuid import uuid4

from jose import JWTError

from recruitment_api.core.context import SYSTEM_USER_ID, RequestContext
from recruitment_api.core.errors import NotFoundError, UnauthorizedError
from recruitment_api.core.security import REFRESH_TOKEN_TYPE, issue_token_pair, read_claims, verify_password
from recruitment_api.db.base import utc_now
from recruitment_api.db.tables import TableNames
from recruitment_api.repositories.unit_of_work import UnitOfWork
from recruitment_api.schemas.auth import (
    AuthSession,
    LoginRequest,
    RegisterRequest,
    TokenPair,
    UserCreate,
    UserRead,
)
from recruitment_api.schemas.entities import Organization, User, UserRole
from recruitment_api.schemas.user_info import UserInfoCreate

from .user_info import UserInfoService
from .users import UserService

logger = logging.getLogger(__name__)


class AuthService:
    """
    Sign-up, login and token refresh.

    Not tied to a single table: registration writes an organization, its
    admin user and that user's profile in one transaction.
    """

    def __init__(self, uow: UnitOfWork, context: RequestContext) -> None:
        self.uow = uow
        self.context = context

    def _users(self, uow: UnitOfWork, tenant_id: str | None = None) -> UserService:
        return UserService(uow, RequestContext.anonymous(self.context.request_id, tenant_id=tenant_id))

    @staticmethod
    def issue_tokens(user: User | UserRead) -> TokenPair:
        return TokenPair(**issue_token_pair(user.Uid, user.OrgId, role=user.Role, email=user.Email))

    # PUBLIC_INTERFACE
    async def register(self, payload: RegisterRequest) -> AuthSession:
        """Create an organization with an admin user and return a signed-in session."""
        org_id = str(uuid4())

        async def _register(tx: UnitOfWork) -> UserRead:
            users = self._users(tx, tenant_id=org_id)
            await users.ensure_email_available(payload.Email)
            organization = Organization(
                Uid=org_id,
                OrgId=org_id,
                Name=payload.OrganizationName,
                Email=payload.Email,
                Phone=payload.Phone,
                OrgSite=payload.OrgSite,
                Owner=payload.Email,
                IsActive=True,
                IsDeleted=False,
                CreatedOn=utc_now(),
                CreatedBy=SYSTEM_USER_ID,
            )
            await tx.get_repository(TableNames.ORGANIZATION).create(organization)
            created = await users.create_async(
                UserCreate(Email=payload.Email, Password=payload.Password, Role=UserRole.ADMIN)
            )
            await UserInfoService(tx, users.context).create_async(
                UserInfoCreate(
                    UserId=created.entity.Uid,
                    Email=payload.Email,
                    FirstName=payload.FirstName,
                    LastName=payload.LastName,
                    Phone=payload.Phone,
                )
            )
            return created.entity

        user = await self.uow.transaction(_register)
        logger.info("Registered organization %s with admin %s", org_id, user.Uid)
        return AuthSession(tokens=self.issue_tokens(user), user=user)

    # PUBLIC_INTERFACE
    async def login(self, payload: LoginRequest) -> AuthSession:
        """Verify email/password and issue a token pair."""
        user = await self._users(self.uow).get_by_email(payload.Email)
        if user is None or not user.Password or not verify_password(payload.Password, user.Password):
            raise UnauthorizedError("Invalid credentials")
        if not user.IsActive:
            raise UnauthorizedError("User is inactive")
        return AuthSession(tokens=self.issue_tokens(user), user=UserRead.model_validate(user.model_dump()))

    async def display_name(self, user: User | UserRead) -> str:
        """First name from the user's profile, "User" when there is none."""
        profiles = UserInfoService(self.uow, RequestContext.anonymous(self.context.request_id, tenant_id=user.OrgId))
        info = await profiles.find_for_user(user.Uid)
        return (info.FirstName if info else None) or "User"

    # PUBLIC_INTERFACE
    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a valid refresh token for a new token pair."""
        try:
            claims = read_claims(refresh_token, REFRESH_TOKEN_TYPE)
        except JWTError:
            raise UnauthorizedError("Invalid refresh token")

        user = await self.uow.get_repository(TableNames.USER).find_by_uid(claims.user_id)
        if user is None or user.OrgId != claims.tenant_id or not user.IsActive:
            raise UnauthorizedError("Invalid refresh token")
        return self.issue_tokens(user)

    # PUBLIC_INTERFACE
    async def me(self) -> UserRead:
        """Profile of the authenticated caller."""
        if self.context.user_id is None or self.context.tenant_id is None:
            raise UnauthorizedError()
        user = await self.uow.get_repository(TableNames.USER).find_by_id(
            self.context.user_id, self.context.tenant_id
        )
        if user is None:
            raise NotFoundError("User not found")
        return UserRead.model_validate(user.model_dump())
