"""
Models Module
Typed representation of extracted questions, answer requests and outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple

from pydantic import BaseModel, Field


class QuestionKind(Enum):
    """Enumeration of supported question types."""
    MULTIPLE_CHOICE = "multiple_choice"
    MATCHING = "matching"
    DROPDOWN = "dropdown"


class MatchPair(NamedTuple):
    """One term/definition pair of a matching question."""
    term: str
    definition: str


@dataclass(frozen=True)
class QuestionModel:
    """
    A single quiz question as found on the page.

    ``options`` and ``matches`` are mutually exclusive: choice-style questions
    carry options, matching questions carry pairs. ``source_ref`` points back
    at the originating container (or control) and is only meant for the
    auto-filler; it never takes part in equality or serialization.
    """
    kind: QuestionKind
    stem: str = ''
    options: Optional[Tuple[str, ...]] = None
    matches: Optional[Tuple[MatchPair, ...]] = None
    correct_answer: Optional[str] = None
    source_ref: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.stem is None:
            object.__setattr__(self, 'stem', '')

        if self.kind is QuestionKind.MATCHING:
            if self.options is not None:
                raise ValueError("Matching questions cannot carry options")
            object.__setattr__(self, 'matches', tuple(MatchPair(*m) for m in (self.matches or ())))
        else:
            if self.matches is not None:
                raise ValueError(f"{self.kind.value} questions cannot carry matches")
            object.__setattr__(self, 'options', tuple(self.options or ()))

        if self.correct_answer is not None and self.kind is not QuestionKind.DROPDOWN:
            raise ValueError("Only dropdown questions carry a scraped correct answer")

    @classmethod
    def multiple_choice(cls, stem: str, options: Sequence[str], source_ref: Any = None) -> 'QuestionModel':
        return cls(QuestionKind.MULTIPLE_CHOICE, stem, options=tuple(options), source_ref=source_ref)

    @classmethod
    def matching(cls, stem: str, matches: Sequence[Tuple[str, str]], source_ref: Any = None) -> 'QuestionModel':
        return cls(QuestionKind.MATCHING, stem, matches=tuple(matches), source_ref=source_ref)

    @classmethod
    def dropdown(cls, stem: str, options: Sequence[str], correct_answer: Optional[str] = None,
                 source_ref: Any = None) -> 'QuestionModel':
        return cls(QuestionKind.DROPDOWN, stem, options=tuple(options),
                   correct_answer=correct_answer, source_ref=source_ref)

    def to_dict(self) -> dict:
        """Serialize without the source reference."""
        data = {'kind': self.kind.value, 'stem': self.stem}
        if self.kind is QuestionKind.MATCHING:
            data['matches'] = [{'term': m.term, 'definition': m.definition} for m in self.matches]
        else:
            data['options'] = list(self.options)
        if self.correct_answer is not None:
            data['correct_answer'] = self.correct_answer
        return data


class AnswerRequest(BaseModel):
    """Request body sent to the answer service."""
    stem: str = ''
    options: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """A request with neither stem nor options must not be dispatched."""
        return not self.stem.strip() and not self.options

    @classmethod
    def from_question(cls, question: QuestionModel) -> 'AnswerRequest':
        # Matching questions only ask the service about the stem
        return cls(stem=question.stem, options=list(question.options or ()))


class OutcomeStatus(Enum):
    """Result categories of a single answer retrieval."""
    OK = "ok"
    HTTP_ERROR = "httpError"
    NETWORK_ERROR = "networkError"
    EMPTY = "empty"


@dataclass(frozen=True)
class AnswerOutcome:
    """Per-question result of one answer retrieval attempt."""
    status: OutcomeStatus
    question_index: int
    answer_text: Optional[str] = None
    http_status: Optional[int] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.status is OutcomeStatus.OK) != (self.answer_text is not None):
            raise ValueError("answer_text is present exactly when status is ok")

    @property
    def is_ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    @classmethod
    def ok(cls, question_index: int, answer_text: str) -> 'AnswerOutcome':
        return cls(OutcomeStatus.OK, question_index, answer_text=answer_text)

    @classmethod
    def http_error(cls, question_index: int, http_status: int) -> 'AnswerOutcome':
        return cls(OutcomeStatus.HTTP_ERROR, question_index, http_status=http_status)

    @classmethod
    def network_error(cls, question_index: int, error: str = '') -> 'AnswerOutcome':
        return cls(OutcomeStatus.NETWORK_ERROR, question_index, error=error)

    @classmethod
    def empty(cls, question_index: int) -> 'AnswerOutcome':
        return cls(OutcomeStatus.EMPTY, question_index)

    def with_index(self, question_index: int) -> 'AnswerOutcome':
        """Copy of this outcome tagged with another question index."""
        return AnswerOutcome(self.status, question_index, self.answer_text, self.http_status, self.error)

    def to_dict(self) -> dict:
        data = {'status': self.status.value, 'question_index': self.question_index}
        if self.answer_text is not None:
            data['answer_text'] = self.answer_text
        if self.http_status is not None:
            data['http_status'] = self.http_status
        if self.error:
            data['error'] = self.error
        return data
