"""Grounded question answering over a subject's notes."""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.db.models import ConversationTurn
from app.services.context_assembler import ContextAssembler
from app.services.conversation_log import ConversationLog, make_turn_pair
from app.services.corpus_resolver import CorpusResolver
from app.services.errors import ValidationError
from app.services.llm import TextGenerator
from app.services.prompts import NO_MATERIAL_MESSAGE, build_ask_prompt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AskResult:
    answer: str
    grounded: bool


def conversation_title(question: str, max_chars: int) -> str:
    """Short title derived from the first question of a conversation."""
    title = question[:max_chars]
    return title + "..." if len(question) > max_chars else title


class AnsweringEngine:
    """
    Answers a question from a subject's notes only.

    Flow: resolve subject -> check corpus -> build prompt -> call model ->
    persist the user/assistant pair -> respond. An empty corpus returns the
    no-material message without calling the model or writing anything.
    """

    def __init__(
        self,
        resolver: CorpusResolver,
        generator: TextGenerator,
        settings: Settings | None = None,
        log: ConversationLog | None = None,
    ):
        self.settings = settings or get_settings()
        self.resolver = resolver
        self.generator = generator
        self.log = log or ConversationLog()
        self.assembler = ContextAssembler(
            self.settings.ask_context_max_chars, self.settings.context_truncation
        )

    async def ask(self, db: AsyncSession, user_id: str, subject_name: str, question: str) -> AskResult:
        """
        Answer a question grounded in the subject's notes.

        Args:
            db: Database session
            user_id: Identity provider user id
            subject_name: Subject whose notes ground the answer
            question: The student's question

        Returns:
            AskResult with the answer text; grounded is False when the
            subject had no notes and the fixed message was returned

        Raises:
            ValidationError: Empty question
            NotFoundError: Unknown subject under the strict policy
            UpstreamRateLimitError, UpstreamFailureError: Model call failed
        """
        question = (question or "").strip()
        if not question:
            raise ValidationError("question is required")

        subject = await self.resolver.resolve(db, user_id, subject_name)
        notes = await self.resolver.list_notes(db, subject)
        if not notes:
            logger.warning('Subject "%s" (%s) has no notes, skipping model call', subject.name, subject.id)
            return AskResult(answer=NO_MATERIAL_MESSAGE, grounded=False)

        history = await self.log.recent_history(db, subject.id, self.settings.history_window)
        context = self.assembler.assemble(notes)
        prompt = build_ask_prompt(context, history, question)

        # Errors propagate untouched; nothing has been written yet
        answer = await self.generator.generate(prompt)

        if subject.conversation_title is None:
            subject.conversation_title = conversation_title(question, self.settings.title_max_chars)
        await self.log.append(db, make_turn_pair(subject.id, question, answer))

        logger.info(
            'Answered question for subject "%s" (%s): %d notes, %d context chars',
            subject.name, subject.id, len(notes), len(context),
        )
        return AskResult(answer=answer, grounded=True)

    async def history(
        self, db: AsyncSession, user_id: str, subject_name: str, limit: int | None = None
    ) -> list[ConversationTurn]:
        """Full chronological conversation for a subject (empty if it does not exist yet)."""
        subject = await self.resolver.find(db, user_id, subject_name)
        if subject is None:
            return []
        return await self.log.full_history(db, subject.id, limit or self.settings.history_list_limit)
