"""
Command line entry point: log in to Canvas, extract a quiz, optionally fetch
answers, fill the quiz and submit it.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .api_utils import AnswerClient
from .autofill import QuizAutoFiller
from .browser import BrowserManager, CanvasSession
from .classifier import QuestionClassifier
from .config import CanvasConfig, Settings
from .errors import QuizHelperError
from .extractor import QuestionExtractor
from .orchestrator import AnswerOrchestrator, choices_from_outcomes
from .presenter import render_questions

logger = logging.getLogger('quizhelper')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='quiz-helper',
        description='Extract, answer and submit a Canvas quiz',
    )
    parser.add_argument('--course-id', '--courseId', dest='course_id', required=True,
                        help='The ID of the Canvas course')
    parser.add_argument('--quiz-id', '--quizId', dest='quiz_id', required=True,
                        help='The ID of the quiz to take')
    parser.add_argument('--fetch-answers', action='store_true',
                        help='Ask the answer service about every question before filling')
    parser.add_argument('--no-submit', action='store_true',
                        help='Fill answers but do not submit the quiz')
    parser.add_argument('--concurrency', type=int, default=None,
                        help='Answer requests in flight at once (default: ANSWER_CONCURRENCY or 1)')
    parser.add_argument('--endpoint', default=None,
                        help='Answer service URL (default: ANSWER_ENDPOINT_URL)')
    parser.add_argument('--headful', action='store_true', help='Show the browser window')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


async def run(args: argparse.Namespace, settings: Settings) -> None:
    canvas = CanvasConfig.from_env()
    browser = BrowserManager(headless=settings.browser_headless and not args.headful,
                             timeout=settings.browser_timeout)
    classifier = QuestionClassifier()
    session = CanvasSession(canvas, browser, profile=classifier.profile)

    try:
        await session.initialize()
        await session.login()

        page = await session.navigate_to_quiz(args.course_id, args.quiz_id)
        questions = await QuestionExtractor(classifier).extract(page)
        logger.info(f"Found questions: {len(questions)}")

        choices = {}
        if args.fetch_answers:
            client = AnswerClient(args.endpoint or settings.answer_endpoint_url,
                                  timeout=settings.answer_timeout)
            orchestrator = AnswerOrchestrator(client, args.concurrency or settings.answer_concurrency)
            outcomes = await orchestrator.run(questions)
            logger.info(f"Answers:\n{render_questions(questions, outcomes)}")
            choices = choices_from_outcomes(questions, outcomes)

        filler = QuizAutoFiller(page)
        await filler.fill_answers(questions, choices)
        if not args.no_submit:
            await filler.submit_quiz()
    finally:
        await session.close()


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as e:
        # --help exits 0; any argument error is a plain failure
        return 0 if not e.code else 1
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        settings = Settings.from_env()
        asyncio.run(run(args, settings))
    except QuizHelperError as e:
        logger.error(f"Error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1

    logger.info('Quiz completed successfully!')
    return 0


if __name__ == '__main__':
    sys.exit(main())
