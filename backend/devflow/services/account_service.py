"""
DevFlow Backend — Account Service
===================================

What:  List accounts and link a new provider account to a user.
Why:   One user may sign in through several providers, but a given
       (provider, provider_account_id) pair belongs to exactly one account.
How:   Lookup-then-insert inside a transaction, backed by the
       `uq_accounts_provider_account` constraint; a race that slips past
       the lookup surfaces as an IntegrityError, which the guard reports
       as a conflict too.
"""

import logging
from typing import List

from sqlalchemy import asc, select

from devflow.database import DocumentStore, store as default_store
from devflow.exceptions import ConflictError, NotFoundError
from devflow.models import Account, User
from devflow.schemas.user import AccountOut, AccountParams
from devflow.security import hash_password
from devflow.services.guard import ActionContext, server_action

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    @server_action()
    async def list_accounts(self, ctx: ActionContext) -> List[AccountOut]:
        async with self.store.session() as session:
            accounts = await session.scalars(select(Account).order_by(asc(Account.created_at)))
            return [AccountOut.model_validate(a) for a in accounts]

    @server_action(AccountParams, status=201)
    async def create_account(self, ctx: ActionContext) -> AccountOut:
        params: AccountParams = ctx.params
        async with self.store.transaction() as tx:
            if await tx.get(User, params.user_id) is None:
                raise NotFoundError("User", str(params.user_id))

            existing = await tx.scalar(
                select(Account.id).where(
                    Account.provider == params.provider,
                    Account.provider_account_id == params.provider_account_id,
                )
            )
            if existing is not None:
                raise ConflictError("An account with the same provider already exists")

            values = params.model_dump()
            if params.password:
                values["password"] = hash_password(params.password)
            account = Account(**values)
            tx.add(account)
            await tx.flush()
            result = AccountOut.model_validate(account)

        logger.info("Account %s/%s linked to user %s", params.provider, result.id, params.user_id)
        return result


account_service = AccountService()
