"""
Presenter Module
Plain-text rendering of questions and their answer outcomes.
"""

from typing import List, Optional, Sequence

from .models import AnswerOutcome, OutcomeStatus, QuestionKind, QuestionModel


def render_outcome(outcome: AnswerOutcome) -> str:
    """One line describing an outcome."""
    if outcome.status is OutcomeStatus.OK:
        return f"Answer: {outcome.answer_text}"
    if outcome.status is OutcomeStatus.HTTP_ERROR:
        return f"Error: Could not get answer ({outcome.http_status})"
    if outcome.status is OutcomeStatus.NETWORK_ERROR:
        return "Network error fetching answer."
    return "No answer found."


def render_question(index: int, question: QuestionModel,
                    outcome: Optional[AnswerOutcome] = None) -> List[str]:
    lines = [f"Q{index + 1}: {question.stem}"]
    if question.kind is QuestionKind.MATCHING:
        lines.extend(f"  - {m.term} → {m.definition}" for m in question.matches)
    else:
        lines.extend(f"  - {option}" for option in question.options)
    if question.correct_answer:
        lines.append(f"  Correct Answer (Scraped): {question.correct_answer}")
    if outcome is not None:
        lines.append(f"  {render_outcome(outcome)}")
    return lines


def render_questions(questions: Sequence[QuestionModel],
                     outcomes: Optional[Sequence[AnswerOutcome]] = None) -> str:
    """
    Render questions with their latest outcomes.

    Outcomes are attached by question index, so a partial or reordered
    outcome list still lands on the right question.
    """
    by_index = {o.question_index: o for o in outcomes or ()}
    blocks = []
    for index, question in enumerate(questions):
        blocks.append('\n'.join(render_question(index, question, by_index.get(index))))
    return '\n\n'.join(blocks)
