"""
Auto Filler Module
Applies chosen answers to the quiz page and submits it.
"""

import logging
from typing import Mapping, Optional, Sequence

from .classifier import CANVAS_PROFILE, MarkupProfile
from .errors import AutoFillError, ElementNotFound
from .models import QuestionKind, QuestionModel
from .page import PageElement, PageHandle, box_center

logger = logging.getLogger(__name__)

SUBMIT_SELECTOR = 'button[type="submit"]'
CONFIRMATION_SELECTOR = '.quiz-submission-confirmation'
CONFIRM_BUTTON_SELECTOR = '.quiz-submission-confirmation button[type="submit"]'


class QuizAutoFiller:
    """
    Fills quiz answers on the page.

    Which answer is correct is the caller's decision: choices are passed in
    by question index. Without a choice, multiple-choice questions fall back
    to the first option and dropdowns are left untouched.
    """

    def __init__(self, page: PageHandle, profile: MarkupProfile = CANVAS_PROFILE):
        self.page = page
        self.profile = profile

    async def fill_answers(self, questions: Sequence[QuestionModel],
                           choices: Optional[Mapping[int, str]] = None):
        """
        Fill every question in order; the first failure aborts the rest.

        Args:
            questions: Extracted questions (with their source references)
            choices: Question index to chosen option text
        """
        choices = choices or {}
        for index, question in enumerate(questions):
            choice = choices.get(index)
            logger.info(f"Filling question {index + 1} ({question.kind.value})")
            if question.kind is QuestionKind.MULTIPLE_CHOICE:
                await self.fill_multiple_choice(question, choice)
            elif question.kind is QuestionKind.MATCHING:
                await self.fill_matching(question)
            elif question.kind is QuestionKind.DROPDOWN and choice is not None:
                await self.fill_dropdown(question, choice)

    async def fill_multiple_choice(self, question: QuestionModel, choice: Optional[str] = None):
        """Activate the radio control of the chosen option (first option when none is chosen)."""
        if not question.options:
            raise AutoFillError('No options available for multiple choice question')
        container = self._container(question)

        if choice is None:
            control = await container.query(f"{self.profile.answer} {self.profile.answer_control}")
            if control is None:
                raise AutoFillError('Could not find radio button for multiple choice question')
            await control.click()
            return

        for answer in await container.query_all(self.profile.answer):
            if await answer.text() == choice:
                control = await answer.query(self.profile.answer_control)
                if control is None:
                    raise AutoFillError(f"Could not find radio button for option '{choice}'")
                await control.click()
                return
        raise AutoFillError(f"Option '{choice}' not found in question '{question.stem[:50]}'")

    async def fill_matching(self, question: QuestionModel):
        """Drag each term onto its definition, pair by pair."""
        if not question.matches:
            raise AutoFillError('No matches available for matching question')
        container = self._container(question)

        terms = await container.query_all(self.profile.matching_term)
        definitions = await container.query_all(self.profile.matching_definition)

        for i in range(len(question.matches)):
            if i >= len(terms) or i >= len(definitions):
                raise AutoFillError(f"Could not find term or definition at index {i}")

            term_box = await terms[i].bounding_box()
            definition_box = await definitions[i].bounding_box()
            if not term_box or not definition_box:
                raise AutoFillError('Could not get positions of term or definition')

            await self.page.drag(box_center(term_box), box_center(definition_box))
            logger.debug(f"Dragged '{question.matches[i].term}' to '{question.matches[i].definition}'")

    async def fill_dropdown(self, question: QuestionModel, choice: str):
        """Select the chosen option on the question's own select control."""
        control = question.source_ref
        if not isinstance(control, PageElement):
            raise AutoFillError(f"Dropdown '{question.stem[:50]}' has no page control")
        try:
            await control.select_option(choice)
        except ElementNotFound as e:
            raise AutoFillError(str(e)) from e

    async def submit_quiz(self):
        """Submit the form and confirm the submission dialog if one is shown."""
        submit_button = await self.page.query(SUBMIT_SELECTOR)
        if submit_button is None:
            raise AutoFillError('Could not find submit button')
        await submit_button.click()
        logger.info("Quiz submitted")

        try:
            await self.page.wait_for(CONFIRMATION_SELECTOR)
        except ElementNotFound as e:
            raise AutoFillError(f"Submission confirmation did not appear: {e}") from e

        confirm_button = await self.page.query(CONFIRM_BUTTON_SELECTOR)
        if confirm_button is not None:
            await confirm_button.click()
            logger.info("Submission confirmed")

    def _container(self, question: QuestionModel) -> PageElement:
        container = question.source_ref
        if not isinstance(container, PageElement):
            raise AutoFillError(f"Question '{question.stem[:50]}' has no page container")
        return container
