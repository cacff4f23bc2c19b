"""
DevFlow Backend — Tag, Interaction & Search Tests

What we test:
    ✅ Tag listing filters and top tags
    ✅ Questions under a tag
    ✅ Interactions recorded for the caller
    ✅ Global search limits per type and answer hits link to the question
"""

import uuid

import pytest

from conftest import ANSWER_TEXT, count_rows, question_payload
from devflow.exceptions import ErrorKind
from devflow.models import Interaction
from devflow.services.answer_service import AnswerService
from devflow.services.interaction_service import InteractionService
from devflow.services.question_service import QuestionService
from devflow.services.search_service import SearchService
from devflow.services.tag_service import TagService


async def _seed(store, author):
    service = QuestionService(store)
    await service.create_question(question_payload("Async python one", ["python", "asyncio"]), session=author)
    await service.create_question(question_payload("Async python two", ["python"]), session=author)
    created = await service.create_question(question_payload("Rust lifetimes", ["rust"]), session=author)
    return created.data


class TestTags:
    @pytest.mark.asyncio
    async def test_popular_and_name_filters(self, store, author):
        await _seed(store, author)
        service = TagService(store)

        popular = await service.get_tags({})
        by_name = await service.get_tags({"filter": "name"})
        searched = await service.get_tags({"query": "syn"})

        assert popular.data.tags[0].name == "python"
        assert popular.data.tags[0].question_count == 2
        assert [t.name for t in by_name.data.tags] == ["asyncio", "python", "rust"]
        assert [t.name for t in searched.data.tags] == ["asyncio"]

    @pytest.mark.asyncio
    async def test_top_tags(self, store, author):
        await _seed(store, author)

        result = await TagService(store).get_top_tags()

        assert result.data[0].name == "python"
        assert len(result.data) == 3

    @pytest.mark.asyncio
    async def test_tag_questions(self, store, author):
        await _seed(store, author)
        service = TagService(store)
        python = (await service.get_tags({"query": "python"})).data.tags[0]

        result = await service.get_tag_questions({"tag_id": str(python.id)})

        assert result.data.tag.name == "python"
        assert {q.title for q in result.data.questions} == {"Async python one", "Async python two"}
        assert result.data.is_next is False

    @pytest.mark.asyncio
    async def test_unknown_tag(self, store):
        result = await TagService(store).get_tag_questions({"tag_id": str(uuid.uuid4())})
        assert result.error.kind == ErrorKind.NOT_FOUND


class TestInteractions:
    @pytest.mark.asyncio
    async def test_records_interaction_for_caller(self, store, author, other_user):
        question = await _seed(store, author)

        result = await InteractionService(store).create_interaction(
            {
                "action": "view",
                "action_id": str(question.id),
                "action_target": "question",
                "author_id": str(author.user_id),
            },
            session=other_user,
        )

        assert result.success is True
        assert result.data.user_id == other_user.user_id
        assert await count_rows(store, Interaction) == 1

    @pytest.mark.asyncio
    async def test_unknown_action_rejected(self, store, author, other_user):
        result = await InteractionService(store).create_interaction(
            {
                "action": "teleport",
                "action_id": str(uuid.uuid4()),
                "action_target": "question",
                "author_id": str(author.user_id),
            },
            session=other_user,
        )

        assert result.error.kind == ErrorKind.VALIDATION
        assert await count_rows(store, Interaction) == 0


class TestGlobalSearch:
    @pytest.mark.asyncio
    async def test_two_hits_per_type_without_type(self, store, author):
        for i in range(4):
            await QuestionService(store).create_question(
                question_payload(f"Python question {i}", ["misc"]), session=author
            )

        result = await SearchService(store).global_search({"query": "python"})

        question_hits = [h for h in result.data if h.type == "question"]
        assert len(question_hits) == 2

    @pytest.mark.asyncio
    async def test_typed_search_and_answer_links(self, store, author):
        question = await _seed(store, author)
        await AnswerService(store).create_answer(
            {"question_id": str(question.id), "content": ANSWER_TEXT}, session=author
        )

        answers = await SearchService(store).global_search({"query": "rolls", "type": "answer"})

        assert len(answers.data) == 1
        assert answers.data[0].id == question.id
        assert answers.data[0].title == "Answers containing rolls"

    @pytest.mark.asyncio
    async def test_empty_query_rejected(self, store):
        result = await SearchService(store).global_search({"query": ""})
        assert result.error.kind == ErrorKind.VALIDATION
