"""
DevFlow Backend — Vote Service (three-state machine)
======================================================

What:  Cast, toggle off, or switch a vote on a question or answer, and report
       the caller's current vote on a target.
Why:   A target's upvotes/downvotes must always equal the number of vote
       rows of that type pointing at it.
How:   The vote row change and the counter change(s) share one transaction.

States per (author, target) and transitions on cast(v):
    NoVote     ──cast(v)──▶  Voted(v)     v counter +1, insert row
    Voted(v)   ──cast(v)──▶  NoVote       v counter -1, delete row
    Voted(v)   ──cast(w)──▶  Voted(w)     v counter -1, w counter +1,
                                          update row type

Concurrency:
    The existing-vote lookup is query-before-write. Two concurrent first
    casts by the same author on the same target can both insert a row; the
    votes table carries no unique constraint on (author, target).
"""

import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from devflow.database import DocumentStore, store as default_store
from devflow.exceptions import NotFoundError, ValidationError
from devflow.models import Answer, Question, TargetType, Vote, VoteType
from devflow.schemas.interaction import CreateVoteParams, HasVotedOut, HasVotedParams, VoteCountOut
from devflow.services.guard import ActionContext, server_action

logger = logging.getLogger(__name__)

TARGET_MODELS = {
    TargetType.QUESTION: Question,
    TargetType.ANSWER: Answer,
}


async def update_vote_count(
    tx: AsyncSession,
    target_type: TargetType,
    target_id: uuid.UUID,
    vote_type: VoteType,
    change: int,
) -> None:
    """
    Add `change` (+1 or -1) to the target's upvotes or downvotes.

    Runs inside the caller's transaction. Raises NotFoundError when the
    target does not exist, which aborts that transaction.
    """
    if change not in (1, -1):
        raise ValidationError({"change": ["Change must be 1 or -1"]})

    model = TARGET_MODELS[target_type]
    column = model.upvotes if vote_type == VoteType.UPVOTE else model.downvotes
    result = await tx.execute(
        update(model)
        .where(model.id == target_id)
        .values({column.key: column + change})
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError(target_type.value.capitalize(), str(target_id))


class VoteService:
    def __init__(self, store: DocumentStore = None):
        self.store = store or default_store

    async def _find_vote(self, tx: AsyncSession, author_id, target_id, target_type):
        return await tx.scalar(
            select(Vote).where(
                Vote.author_id == author_id,
                Vote.target_id == target_id,
                Vote.target_type == target_type,
            )
        )

    @server_action(CreateVoteParams, authorize=True)
    async def create_vote(self, ctx: ActionContext) -> VoteCountOut:
        params: CreateVoteParams = ctx.params
        target = (params.target_type, params.target_id)

        async with self.store.transaction() as tx:
            existing = await self._find_vote(tx, ctx.user_id, params.target_id, params.target_type)

            if existing is None:
                tx.add(
                    Vote(
                        author_id=ctx.user_id,
                        target_id=params.target_id,
                        target_type=params.target_type,
                        vote_type=params.vote_type,
                    )
                )
                await update_vote_count(tx, *target, params.vote_type, 1)
                transition = "cast"
            elif existing.vote_type == params.vote_type:
                await tx.delete(existing)
                await update_vote_count(tx, *target, params.vote_type, -1)
                transition = "removed"
            else:
                previous = existing.vote_type
                existing.vote_type = params.vote_type
                await update_vote_count(tx, *target, previous, -1)
                await update_vote_count(tx, *target, params.vote_type, 1)
                transition = "switched"

            model = TARGET_MODELS[params.target_type]
            row = (
                await tx.execute(
                    select(model.upvotes, model.downvotes).where(model.id == params.target_id)
                )
            ).one()

        logger.info(
            "Vote %s: %s %s on %s %s",
            transition,
            ctx.user_id,
            params.vote_type.value,
            params.target_type.value,
            params.target_id,
        )
        return VoteCountOut(upvotes=row.upvotes, downvotes=row.downvotes)

    @server_action(HasVotedParams, authorize=True)
    async def has_voted(self, ctx: ActionContext) -> HasVotedOut:
        params: HasVotedParams = ctx.params
        async with self.store.session() as session:
            vote = await self._find_vote(session, ctx.user_id, params.target_id, params.target_type)

        if vote is None:
            return HasVotedOut()
        return HasVotedOut(
            has_upvoted=vote.vote_type == VoteType.UPVOTE,
            has_downvoted=vote.vote_type == VoteType.DOWNVOTE,
        )


vote_service = VoteService()
