from fastapi import APIRouter, Depends, Query

from rocketfuel.dependencies import get_answer_service, get_auth, get_question_service
from rocketfuel.schemas import Answer, AnswerCreate, Auth, Question, QuestionCreate
from rocketfuel.services.answer_service import AnswerService
from rocketfuel.services.question_service import QuestionService

router = APIRouter(prefix="/api/questions", tags=["questions"])


@router.get("", response_model=list[Question])
async def search_questions(
    search: str | None = None,
    limit: int | None = Query(None, ge=1, le=100),
    questions: QuestionService = Depends(get_question_service),
):
    return await questions.get_questions_by_search_query(search, limit)


@router.get("/latest", response_model=list[Question])
async def latest_questions(
    limit: int | None = Query(None, ge=1, le=100),
    questions: QuestionService = Depends(get_question_service),
):
    return await questions.get_latest_question(limit)


@router.get("/thread/{thread_id}", response_model=Question)
async def get_question_by_thread(
    thread_id: str, questions: QuestionService = Depends(get_question_service)
):
    return await questions.get_question_by_slack_thread_id(thread_id)


@router.post("/thread/{thread_id}/upvote", status_code=204)
async def up_vote_question(
    thread_id: str, questions: QuestionService = Depends(get_question_service)
):
    await questions.up_vote_question(thread_id)


@router.post("/thread/{thread_id}/downvote", status_code=204)
async def down_vote_question(
    thread_id: str, questions: QuestionService = Depends(get_question_service)
):
    await questions.down_vote_question(thread_id)


@router.get("/{question_id}", response_model=Question)
async def get_question(question_id: int, questions: QuestionService = Depends(get_question_service)):
    return await questions.get_question_by_id(question_id)


@router.post("", status_code=201, response_model=Question)
async def create_question(
    data: QuestionCreate,
    auth: Auth = Depends(get_auth),
    questions: QuestionService = Depends(get_question_service),
):
    return await questions.create_question(auth, data)


@router.get("/{question_id}/answers", response_model=list[Answer])
async def get_answers(question_id: int, answers: AnswerService = Depends(get_answer_service)):
    return await answers.get_answers(question_id)


@router.post("/{question_id}/answers", status_code=201, response_model=Answer)
async def answer_question(
    question_id: int,
    data: AnswerCreate,
    auth: Auth = Depends(get_auth),
    answers: AnswerService = Depends(get_answer_service),
):
    return await answers.answer_question(auth, data, question_id)


@router.put("/{question_id}/answers/{answer_id}", response_model=Answer)
async def update_answer(
    question_id: int,
    answer_id: int,
    data: AnswerCreate,
    auth: Auth = Depends(get_auth),
    answers: AnswerService = Depends(get_answer_service),
):
    return await answers.update_answer(auth, question_id, answer_id, data)
