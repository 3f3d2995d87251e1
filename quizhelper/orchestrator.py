"""
Answer Orchestrator Module
Fans extracted questions out to the answer client and collects one outcome
per question, in extraction order.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Sequence

from .api_utils import AnswerClient
from .models import AnswerOutcome, AnswerRequest, QuestionKind, QuestionModel

logger = logging.getLogger(__name__)


class AnswerOrchestrator:
    """
    Retrieves answers for a set of questions.

    A failure for one question is recorded as that question's outcome and
    never affects the others. Every run produces a fresh outcome list that
    replaces the previous one.
    """

    def __init__(self, client: AnswerClient, max_concurrency: int = 1,
                 on_outcome: Optional[Callable[[AnswerOutcome], None]] = None):
        """
        Args:
            client: Answer service client
            max_concurrency: Requests in flight at once; 1 answers strictly one by one
            on_outcome: Called with each outcome as soon as it is recorded
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.client = client
        self.max_concurrency = max_concurrency
        self.on_outcome = on_outcome
        self._outcomes: List[AnswerOutcome] = []

    @property
    def outcomes(self) -> List[AnswerOutcome]:
        """Outcomes of the latest run."""
        return list(self._outcomes)

    def outcome_for(self, index: int) -> Optional[AnswerOutcome]:
        if 0 <= index < len(self._outcomes):
            return self._outcomes[index]
        return None

    async def run(self, questions: Sequence[QuestionModel]) -> List[AnswerOutcome]:
        """
        Get answers for all questions.

        Returns:
            One outcome per question, in input order
        """
        logger.info(f"Fetching answers for {len(questions)} questions "
                    f"(concurrency {self.max_concurrency})")
        slots: List[Optional[AnswerOutcome]] = [None] * len(questions)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def answer(index: int, question: QuestionModel):
            async with semaphore:
                slots[index] = await self._fetch(AnswerRequest.from_question(question), index)
            if self.on_outcome is not None:
                try:
                    self.on_outcome(slots[index])
                except Exception as e:
                    logger.error(f"Outcome callback failed for question {index + 1}: {e}")

        if self.max_concurrency == 1:
            for index, question in enumerate(questions):
                await answer(index, question)
        else:
            await asyncio.gather(*(answer(i, q) for i, q in enumerate(questions)))

        self._outcomes = list(slots)
        failed = sum(1 for o in self._outcomes if not o.is_ok)
        logger.info(f"Answers fetched: {len(self._outcomes) - failed} ok, {failed} without answer")
        return self.outcomes

    async def answer_question(self, stem: str, options: Sequence[str] = ()) -> AnswerOutcome:
        """Answer a single ad-hoc question without touching the stored run outcomes."""
        return await self._fetch(AnswerRequest(stem=stem, options=list(options)), 0)

    async def _fetch(self, request: AnswerRequest, index: int) -> AnswerOutcome:
        try:
            outcome = await asyncio.to_thread(self.client.get_answer, request, index)
        except Exception as e:
            logger.error(f"Answer client failed for question {index + 1}: {e}")
            return AnswerOutcome.network_error(index, str(e))
        # The client may not know the index; the orchestrator owns the tag
        if outcome.question_index != index:
            outcome = outcome.with_index(index)
        return outcome


def choices_from_outcomes(questions: Sequence[QuestionModel],
                          outcomes: Sequence[AnswerOutcome]) -> Dict[int, str]:
    """
    Map question index to chosen option text for the auto-filler.

    Only ok outcomes for choice-style questions whose answer is one of the
    question's options are used.
    """
    choices = {}
    for outcome in outcomes:
        if not outcome.is_ok or not 0 <= outcome.question_index < len(questions):
            continue
        question = questions[outcome.question_index]
        if question.kind is QuestionKind.MATCHING:
            continue
        if outcome.answer_text in question.options:
            choices[outcome.question_index] = outcome.answer_text
        else:
            logger.warning(f"Answer {outcome.answer_text!r} for question {outcome.question_index + 1} "
                           f"is not one of its options")
    return choices
