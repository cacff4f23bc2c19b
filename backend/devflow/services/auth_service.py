"""
DevFlow Backend — Credential Sign-Up & Sign-In
================================================

What:  Email/password registration and login for the `credentials`
       provider. Both return a signed session token.
How:   Sign-up creates the user and its credentials account in one
       transaction; a duplicate email or username aborts both.
"""

import logging

from sqlalchemy import select

from devflow.database import DocumentStore, store as default_store
from devflow.exceptions import NotFoundError, UnauthorizedError
from devflow.models import Account, User
from devflow.schemas.user import AuthOut, SignInParams, SignUpParams
from devflow.security import hash_password, issue_session_token, verify_password
from devflow.services.guard import ActionContext, server_action
from devflow.services.user_service import ensure_unique_user

logger = logging.getLogger(__name__)

CREDENTIALS_PROVIDER = "credentials"


class AuthService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    @server_action(SignUpParams, status=201)
    async def sign_up_with_credentials(self, ctx: ActionContext) -> AuthOut:
        params: SignUpParams = ctx.params
        async with self.store.transaction() as tx:
            await ensure_unique_user(
                tx,
                params.email,
                params.username,
                email_message="User already exists",
                username_message="Username already exists",
            )
            user = User(name=params.name, username=params.username, email=params.email)
            tx.add(user)
            await tx.flush()

            tx.add(
                Account(
                    user_id=user.id,
                    name=params.name,
                    provider=CREDENTIALS_PROVIDER,
                    provider_account_id=params.email,
                    password=hash_password(params.password),
                )
            )

        logger.info("User %s signed up with credentials", user.id)
        return AuthOut(
            user_id=user.id,
            access_token=issue_session_token(user.id, user.name, user.image),
        )

    @server_action(SignInParams)
    async def sign_in_with_credentials(self, ctx: ActionContext) -> AuthOut:
        params: SignInParams = ctx.params
        async with self.store.session() as session:
            user = await session.scalar(select(User).where(User.email == params.email))
            if user is None:
                raise NotFoundError("User")

            account = await session.scalar(
                select(Account).where(
                    Account.provider == CREDENTIALS_PROVIDER,
                    Account.provider_account_id == params.email,
                )
            )
            if account is None:
                raise NotFoundError("Account")

        if not verify_password(params.password, account.password):
            raise UnauthorizedError("Password is incorrect")

        logger.info("User %s signed in", user.id)
        return AuthOut(
            user_id=user.id,
            access_token=issue_session_token(user.id, user.name, user.image),
        )


auth_service = AuthService()
