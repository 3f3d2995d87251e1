"""
Question Classifier Module
Turns question containers into typed question models using pluggable,
marker-based classifier functions.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from .models import QuestionModel
from .page import PageElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkupProfile:
    """Selectors and marker classes describing one quiz page layout."""
    container: str = '.question'
    stem: str = '.question_text'
    multiple_choice_marker: str = 'multiple_choice_question'
    answer: str = '.answer'
    answer_control: str = 'input[type="radio"]'
    matching_marker: str = 'matching_question'
    matching_term: str = '.matching_term'
    matching_definition: str = '.matching_definition'
    dropdown: str = 'select'
    dropdown_option: str = 'option'
    dropdown_scope: str = '.question_content'
    correct_answer: str = '.correct_answer'


CANVAS_PROFILE = MarkupProfile()

# (container, container stem, profile) -> model or None
ContainerClassifier = Callable[[PageElement, str, MarkupProfile], Awaitable[Optional[QuestionModel]]]
# (container, container stem, profile) -> extra models for embedded controls
EmbeddedClassifier = Callable[[PageElement, str, MarkupProfile], Awaitable[List[QuestionModel]]]


async def read_stem(container: PageElement, profile: MarkupProfile) -> str:
    """Prompt text of a container, or empty string when it has none."""
    element = await container.query(profile.stem)
    if element is None:
        return ''
    return await element.text()


async def classify_multiple_choice(container: PageElement, stem: str,
                                   profile: MarkupProfile) -> Optional[QuestionModel]:
    """Multiple-choice container: one option per answer element, in order."""
    if profile.multiple_choice_marker not in await container.classes():
        return None

    options = [await answer.text() for answer in await container.query_all(profile.answer)]
    return QuestionModel.multiple_choice(stem, options, source_ref=container)


async def classify_matching(container: PageElement, stem: str,
                            profile: MarkupProfile) -> Optional[QuestionModel]:
    """Matching container: i-th term paired with i-th definition."""
    if profile.matching_marker not in await container.classes():
        return None

    terms = await container.query_all(profile.matching_term)
    definitions = await container.query_all(profile.matching_definition)
    if len(terms) != len(definitions):
        logger.warning(f"Matching question '{stem[:50]}' has {len(terms)} terms and "
                       f"{len(definitions)} definitions; keeping {min(len(terms), len(definitions))} pairs")

    matches = []
    for term, definition in zip(terms, definitions):
        matches.append((await term.text(), await definition.text()))
    return QuestionModel.matching(stem, matches, source_ref=container)


async def extract_dropdowns(container: PageElement, stem: str,
                            profile: MarkupProfile) -> List[QuestionModel]:
    """One dropdown model per select control inside the container."""
    questions = []
    selects = await container.query_all(profile.dropdown)

    for number, select in enumerate(selects, start=1):
        options = []
        for option in await select.query_all(profile.dropdown_option):
            text = await option.text()
            if text:
                options.append(text)

        prompt = ''
        select_id = await select.attribute('id')
        if select_id:
            for label in await container.query_all('label'):
                if await label.attribute('for') == select_id:
                    prompt = await label.text()
                    break
        if not prompt:
            prompt = f"{stem} (Dropdown {number})" if stem else f"Dropdown {number}"

        correct_answer = None
        scope = await select.closest(profile.dropdown_scope)
        if scope is not None:
            answer_element = await scope.query(profile.correct_answer)
            if answer_element is not None:
                correct_answer = await answer_element.text()

        questions.append(QuestionModel.dropdown(prompt, options, correct_answer, source_ref=select))

    return questions


class QuestionClassifier:
    """
    Classifies question containers.

    Container classifiers are tried in priority order and the first model
    returned wins; embedded classifiers always run and contribute additional
    models after it.
    """

    def __init__(self, profile: MarkupProfile = CANVAS_PROFILE,
                 classifiers: Optional[List[ContainerClassifier]] = None,
                 embedded: Optional[List[EmbeddedClassifier]] = None):
        self.profile = profile
        self.classifiers = list(classifiers) if classifiers is not None else [
            classify_multiple_choice,
            classify_matching,
        ]
        self.embedded = list(embedded) if embedded is not None else [extract_dropdowns]

    def register(self, classifier: ContainerClassifier, first: bool = False):
        """Add a container classifier, optionally ahead of the built-in ones."""
        if first:
            self.classifiers.insert(0, classifier)
        else:
            self.classifiers.append(classifier)

    def register_embedded(self, classifier: EmbeddedClassifier):
        self.embedded.append(classifier)

    async def classify(self, container: PageElement) -> List[QuestionModel]:
        """
        Classify one container.

        Returns:
            The container's own model (if any) followed by models for
            embedded controls; empty when nothing is recognized
        """
        stem = await read_stem(container, self.profile)
        questions = []

        for classifier in self.classifiers:
            question = await classifier(container, stem, self.profile)
            if question is not None:
                questions.append(question)
                break

        for classifier in self.embedded:
            questions.extend(await classifier(container, stem, self.profile))

        return questions
