"""
DevFlow Backend — Interaction Service
=======================================

What:  Record that the caller performed an action (view, upvote, post, ...)
       on a question or answer.
Note:  `author_id` (the content owner) is accepted for the reputation
       rules, which are not applied here; only the activity row is written.
"""

import logging

from devflow.database import DocumentStore, store as default_store
from devflow.models import Interaction
from devflow.schemas.interaction import CreateInteractionParams, InteractionOut
from devflow.services.guard import ActionContext, server_action

logger = logging.getLogger(__name__)


class InteractionService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    @server_action(CreateInteractionParams, authorize=True, status=201)
    async def create_interaction(self, ctx: ActionContext) -> InteractionOut:
        params: CreateInteractionParams = ctx.params
        async with self.store.transaction() as tx:
            interaction = Interaction(
                user_id=ctx.user_id,
                action=params.action,
                action_id=params.action_id,
                action_type=params.action_target,
            )
            tx.add(interaction)
            await tx.flush()
            result = InteractionOut.model_validate(interaction)

        logger.debug(
            "Interaction %s by %s on %s %s",
            params.action, ctx.user_id, params.action_target.value, params.action_id,
        )
        return result


interaction_service = InteractionService()
