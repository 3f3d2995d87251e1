"""
Quiz Helper Module
Question extraction, answer orchestration and auto-fill for Canvas quizzes.
"""

from .models import (
    QuestionKind, MatchPair, QuestionModel, AnswerRequest, OutcomeStatus, AnswerOutcome,
)
from .page import PageElement, PageHandle, HtmlElement, HtmlPage
from .browser import BrowserManager, CanvasSession, PlaywrightPage
from .classifier import MarkupProfile, CANVAS_PROFILE, QuestionClassifier
from .extractor import QuestionExtractor
from .api_utils import AnswerClient, ChatCompletionClient
from .orchestrator import AnswerOrchestrator, choices_from_outcomes
from .autofill import QuizAutoFiller
from .presenter import render_questions, render_outcome

__all__ = [
    'QuestionKind',
    'MatchPair',
    'QuestionModel',
    'AnswerRequest',
    'OutcomeStatus',
    'AnswerOutcome',
    'PageElement',
    'PageHandle',
    'HtmlElement',
    'HtmlPage',
    'BrowserManager',
    'CanvasSession',
    'PlaywrightPage',
    'MarkupProfile',
    'CANVAS_PROFILE',
    'QuestionClassifier',
    'QuestionExtractor',
    'AnswerClient',
    'ChatCompletionClient',
    'AnswerOrchestrator',
    'choices_from_outcomes',
    'QuizAutoFiller',
    'render_questions',
    'render_outcome',
]
