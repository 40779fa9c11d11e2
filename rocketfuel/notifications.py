"""
Answer notifications.

When a question receives an answer its owner gets a direct message in the
chat workspace.  Delivery is best effort: every failure in the pipeline is
logged at WARNING and dropped, and the work runs as a detached task so it
never delays or fails the request that created the answer.
"""
import asyncio
import logging

from rocketfuel.dao.question_dao import QuestionDao
from rocketfuel.errors import NotFound
from rocketfuel.interfaces import ChatWorkspace, UserDirectory
from rocketfuel.schemas import Answer, Question

logger = logging.getLogger(__name__)


def markdown_section(text: str) -> dict:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def answer_url(base_url: str, question_id: int, answer_id: int) -> str:
    return f"{base_url.rstrip('/')}/question/{question_id}#answer_{answer_id}"


def notification_message(answer: Answer, question: Question, base_url: str) -> list[dict]:
    url = answer_url(base_url, question.id, answer.id)
    return [
        markdown_section(f"Your question: *{question.title}* got an answer:"),
        markdown_section(answer.answer),
        markdown_section(f"Head over to <{url}|rocket-fuel> to accept the answer"),
    ]


class NotificationPublisher:

    def __init__(
        self,
        question_dao: QuestionDao,
        user_directory: UserDirectory,
        chat_workspace: ChatWorkspace,
        base_url: str,
        timeout: float,
    ) -> None:
        self.question_dao = question_dao
        self.user_directory = user_directory
        self.chat_workspace = chat_workspace
        self.base_url = base_url
        self.timeout = timeout
        # Strong references; the event loop only keeps weak ones.
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, answer: Answer, question_id: int) -> asyncio.Task:
        """
        Notify the owner of *question_id* about *answer* in a detached task.

        The task is not tied to the calling request, so a client disconnect
        does not cancel it; it has its own deadline instead.  *answer* must
        already carry its generated id.
        """
        snapshot = answer.model_copy()
        task = asyncio.create_task(
            self._notify(snapshot, question_id),
            name=f"notify-answer-{snapshot.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def publish(self, answer: Answer, question: Question) -> None:
        """Send the notification now; failures are logged, never raised."""
        try:
            await asyncio.wait_for(self._post(answer, question), timeout=self.timeout)
        except Exception:
            logger.warning(
                "Could not notify owner of question %s about answer %s",
                question.id,
                answer.id,
                exc_info=True,
            )

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight notifications, e.g. on shutdown."""
        if not self._tasks:
            return
        _, still_running = await asyncio.wait(set(self._tasks), timeout=timeout)
        if still_running:
            logger.warning("%d notification(s) still running, cancelling", len(still_running))
            for task in still_running:
                task.cancel()

    async def _notify(self, answer: Answer, question_id: int) -> None:
        # One deadline covers the question lookup and the delivery.
        try:
            await asyncio.wait_for(self._deliver(answer, question_id), timeout=self.timeout)
        except Exception:
            logger.warning(
                "Could not notify owner of question %s about answer %s",
                question_id,
                answer.id,
                exc_info=True,
            )

    async def _deliver(self, answer: Answer, question_id: int) -> None:
        question = await self.question_dao.get_question_by_id(question_id).first()
        if question is None:
            raise NotFound()
        await self._post(answer, question)

    async def _post(self, answer: Answer, question: Question) -> None:
        owner = await self.user_directory.get_user_by_id(question.user_id)
        member_id = await self.chat_workspace.get_user_id(owner.email)
        await self.chat_workspace.post_message_as_bot_user(
            member_id, notification_message(answer, question, self.base_url)
        )
        logger.info("Notified owner of question %s about answer %s", question.id, answer.id)
