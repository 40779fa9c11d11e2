from fastapi import APIRouter, Depends, Response

from rocketfuel.dependencies import get_answer_service, get_auth
from rocketfuel.schemas import Answer, Auth
from rocketfuel.services.answer_service import AnswerService

router = APIRouter(prefix="/api/answers", tags=["answers"])


@router.post("/{answer_id}/accept")
async def accept_answer(
    answer_id: int,
    auth: Auth = Depends(get_auth),
    answers: AnswerService = Depends(get_answer_service),
):
    await answers.mark_as_accepted_answer(auth, answer_id)
    return Response(status_code=200)


@router.get("/thread/{thread_id}", response_model=Answer)
async def get_answer_by_thread(thread_id: str, answers: AnswerService = Depends(get_answer_service)):
    return await answers.get_answer_by_slack_id(thread_id)


@router.post("/thread/{thread_id}/upvote", status_code=204)
async def up_vote_answer(thread_id: str, answers: AnswerService = Depends(get_answer_service)):
    await answers.up_vote_answer(thread_id)


@router.post("/thread/{thread_id}/downvote", status_code=204)
async def down_vote_answer(thread_id: str, answers: AnswerService = Depends(get_answer_service)):
    await answers.down_vote_answer(thread_id)
