"""
Question Extractor Module
Scans a page for question containers and produces question models in
document order.
"""

import logging
from typing import List, Optional

from .classifier import QuestionClassifier
from .models import QuestionKind, QuestionModel
from .page import PageHandle

logger = logging.getLogger(__name__)


class QuestionExtractor:
    """
    Extracts questions from a page.

    Extraction is best-effort: unrecognized containers are skipped and a
    container that fails to read degrades to no model. ``extract`` never
    raises.
    """

    def __init__(self, classifier: Optional[QuestionClassifier] = None):
        self.classifier = classifier or QuestionClassifier()

    async def extract(self, page: PageHandle) -> List[QuestionModel]:
        """
        Extract all recognized questions.

        Args:
            page: Page to scan

        Returns:
            Question models in document order
        """
        selector = self.classifier.profile.container
        try:
            containers = await page.query_all(selector)
        except Exception as e:
            logger.error(f"Could not locate question containers ({selector}): {e}")
            return []

        logger.info(f"Found {len(containers)} question containers")
        questions: List[QuestionModel] = []

        for index, container in enumerate(containers):
            try:
                found = await self.classifier.classify(container)
            except Exception as e:
                logger.warning(f"Skipping question container {index}: {e}")
                continue

            if not found:
                logger.debug(f"Container {index} matched no known question type")
            for question in found:
                logger.debug(f"Container {index}: {question.kind.value} '{question.stem[:60]}'")
            questions.extend(found)

        logger.info(f"Extracted {len(questions)} questions: {_summarize(questions)}")
        return questions


def _summarize(questions: List[QuestionModel]) -> str:
    counts = {kind.value: 0 for kind in QuestionKind}
    for question in questions:
        counts[question.kind.value] += 1
    return ', '.join(f"{count} {kind}" for kind, count in counts.items() if count)
