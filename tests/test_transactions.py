"""
Pending operations and the transaction coordinator.

Covers the single-dispatch rule, laziness (nothing runs until consumed),
commit of a batch, rollback of a batch when any member fails, and the
rejection of operations that were dispatched before joining a batch.
"""
import pytest
from sqlalchemy import select, text

from conftest import async_session_test
from rocketfuel import models
from rocketfuel.dao.answer_dao import AnswerDao
from rocketfuel.dao.operation import DaoOperation
from rocketfuel.dao.question_dao import QuestionDao
from rocketfuel.errors import DataAccessFailure, OperationAlreadyExecuted
from rocketfuel.schemas import AnswerCreate, QuestionCreate
from rocketfuel.transactions import TransactionCoordinator


@pytest.fixture
def question_dao() -> QuestionDao:
    return QuestionDao(async_session_test)


@pytest.fixture
def answer_dao() -> AnswerDao:
    return AnswerDao(async_session_test)


@pytest.fixture
def coordinator() -> TransactionCoordinator:
    return TransactionCoordinator(async_session_test)


async def _seed(question_dao: QuestionDao, answer_dao: AnswerDao) -> tuple[int, int]:
    question = await question_dao.add_question(7, QuestionCreate(title="t", question="b"))
    answer = await answer_dao.create_answer(9, question.key, AnswerCreate(answer="a"))
    return question.key, answer.key


# ---------------------------------------------------------------------------
# DaoOperation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_operation_is_lazy(question_dao: QuestionDao, fetch):
    operation = question_dao.add_question(7, QuestionCreate(title="lazy", question="b"))
    assert operation.dispatched is False
    assert await fetch(models.Question, 1) is None

    key = await operation
    assert operation.dispatched is True
    assert (await fetch(models.Question, key.key)).title == "lazy"


@pytest.mark.asyncio
async def test_operation_dispatches_once(question_dao: QuestionDao):
    operation = question_dao.get_latest_questions(5)
    await operation.to_list()
    with pytest.raises(OperationAlreadyExecuted):
        await operation.to_list()


@pytest.mark.asyncio
async def test_operation_streams_rows(question_dao: QuestionDao):
    for i in range(3):
        await question_dao.add_question(7, QuestionCreate(title=f"q{i}", question="b"))

    titles = [q.title async for q in question_dao.get_latest_questions(2)]
    assert titles == ["q2", "q1"]


@pytest.mark.asyncio
async def test_first_on_empty_result(question_dao: QuestionDao):
    assert await question_dao.get_question_by_id(404).first() is None


@pytest.mark.asyncio
async def test_operation_wraps_driver_errors():
    async def body(session):
        await session.execute(text("SELECT * FROM no_such_table"))

    with pytest.raises(DataAccessFailure) as info:
        await DaoOperation(async_session_test, body, "broken_select")
    assert info.value.description == "broken_select"
    assert info.value.cause is not None


# ---------------------------------------------------------------------------
# TransactionCoordinator
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_transaction_commits_all(question_dao, answer_dao, coordinator, fetch):
    question_id, answer_id = await _seed(question_dao, answer_dao)

    await coordinator.execute_transaction(
        answer_dao.mark_as_accepted(answer_id),
        question_dao.mark_as_answered(7, question_id),
    )

    assert (await fetch(models.Answer, answer_id)).accepted is True
    assert (await fetch(models.Question, question_id)).answered is True


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_failure(question_dao, answer_dao, coordinator, fetch):
    question_id, answer_id = await _seed(question_dao, answer_dao)

    async def broken(session):
        await session.execute(text("UPDATE no_such_table SET answered = 1"))

    with pytest.raises(DataAccessFailure):
        await coordinator.execute_transaction(
            answer_dao.mark_as_accepted(answer_id),
            DaoOperation(async_session_test, broken, "broken_update"),
        )

    assert (await fetch(models.Answer, answer_id)).accepted is False
    assert (await fetch(models.Question, question_id)).answered is False


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_any_exception(question_dao, answer_dao, coordinator, fetch):
    question_id, answer_id = await _seed(question_dao, answer_dao)

    async def explode(session):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await coordinator.execute_transaction(
            answer_dao.mark_as_accepted(answer_id),
            DaoOperation(async_session_test, explode, "explode"),
        )

    assert (await fetch(models.Answer, answer_id)).accepted is False


@pytest.mark.asyncio
async def test_transaction_rejects_dispatched_operation(question_dao, answer_dao, coordinator, fetch):
    question_id, answer_id = await _seed(question_dao, answer_dao)

    already_run = question_dao.mark_as_answered(7, question_id)
    await already_run
    pending = answer_dao.mark_as_accepted(answer_id)

    with pytest.raises(OperationAlreadyExecuted):
        await coordinator.execute_transaction(pending, already_run)

    # Rejected before any statement ran.
    assert pending.dispatched is False
    assert (await fetch(models.Answer, answer_id)).accepted is False


@pytest.mark.asyncio
async def test_empty_transaction_is_a_no_op(coordinator):
    await coordinator.execute_transaction()


@pytest.mark.asyncio
async def test_mark_as_answered_only_matches_owner(question_dao, answer_dao, fetch):
    question_id, _ = await _seed(question_dao, answer_dao)
    assert await question_dao.mark_as_answered(9, question_id) == 0
    assert (await fetch(models.Question, question_id)).answered is False
    assert await question_dao.mark_as_answered(7, question_id) == 1


@pytest.mark.asyncio
async def test_answers_by_id_carry_parent_question(question_dao, answer_dao, db_session):
    db_session.add(models.User(id=9, name="Harry Helper", email="b@x"))
    await db_session.commit()
    question_id, answer_id = await _seed(question_dao, answer_dao)

    answer = await answer_dao.get_answer_by_id(answer_id).first()
    assert answer.question is not None
    assert answer.question.id == question_id
    assert answer.question.user_id == 7
    assert answer.created_by == "Harry Helper"

    rows = (await db_session.execute(select(models.Answer))).scalars().all()
    assert len(rows) == 1
