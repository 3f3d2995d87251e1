"""Tests for question classification and extraction."""
import pytest

from quizhelper.classifier import MarkupProfile, QuestionClassifier
from quizhelper.extractor import QuestionExtractor
from quizhelper.models import MatchPair, QuestionKind, QuestionModel
from quizhelper.page import HtmlPage


def matching_page(terms, definitions):
    items = ''.join(f'<div class="matching_term">{t}</div>' for t in terms)
    items += ''.join(f'<div class="matching_definition">{d}</div>' for d in definitions)
    return HtmlPage(f'<div class="question matching_question">'
                    f'<div class="question_text">Match</div>{items}</div>')


@pytest.mark.anyio
class TestQuestionExtractor:
    """Test cases for QuestionExtractor."""

    async def test_extracts_questions_in_document_order(self, quiz_page):
        questions = await QuestionExtractor().extract(quiz_page)

        assert [q.kind for q in questions] == [
            QuestionKind.MULTIPLE_CHOICE,
            QuestionKind.MATCHING,
            QuestionKind.DROPDOWN,
            QuestionKind.DROPDOWN,
        ]

    async def test_multiple_choice_options(self, quiz_page):
        question = (await QuestionExtractor().extract(quiz_page))[0]

        assert question.stem == '2+2=?'
        assert question.options == ('A', 'B', 'C')
        assert question.matches is None

    async def test_matching_pairs(self, quiz_page):
        question = (await QuestionExtractor().extract(quiz_page))[1]

        assert question.matches == (MatchPair('Dog', 'Canine'), MatchPair('Cat', 'Feline'))
        assert question.options is None

    @pytest.mark.parametrize('terms,definitions,expected', [
        (['a', 'b', 'c'], ['1', '2'], 2),
        (['a'], ['1', '2', '3'], 1),
        ([], ['1'], 0),
    ])
    async def test_mismatched_matching_lists_truncate(self, terms, definitions, expected):
        questions = await QuestionExtractor().extract(matching_page(terms, definitions))

        assert len(questions) == 1
        assert len(questions[0].matches) == expected
        assert [m.term for m in questions[0].matches] == terms[:expected]
        assert [m.definition for m in questions[0].matches] == definitions[:expected]

    async def test_dropdown_prompts(self, quiz_page):
        dropdowns = (await QuestionExtractor().extract(quiz_page))[2:]

        assert dropdowns[0].stem == 'Capital of France'
        assert dropdowns[0].options == ('Paris', 'Lyon')
        assert dropdowns[0].correct_answer == 'Paris'
        assert dropdowns[1].stem == 'Fill in the blanks (Dropdown 2)'
        assert dropdowns[1].options == ('Red', 'Blue')

    async def test_dropdown_without_stem_is_numbered(self):
        page = HtmlPage('<div class="question"><select><option>x</option></select></div>')
        questions = await QuestionExtractor().extract(page)

        assert questions == [QuestionModel.dropdown('Dropdown 1', ['x'])]

    async def test_dropdowns_follow_the_containers_own_question(self):
        page = HtmlPage(
            '<div class="question multiple_choice_question">'
            '<div class="question_text">Pick</div>'
            '<div class="answer">Yes</div>'
            '<select><option>One</option></select>'
            '</div>'
        )
        questions = await QuestionExtractor().extract(page)

        assert [q.kind for q in questions] == [QuestionKind.MULTIPLE_CHOICE, QuestionKind.DROPDOWN]
        assert questions[1].stem == 'Pick (Dropdown 1)'

    async def test_dropdown_label_with_quotes_in_id(self):
        page = HtmlPage(
            '<div class="question multiple_choice_question">'
            '<div class="question_text">Pick</div>'
            '<div class="answer">Yes</div>'
            '<label for=\'a"b\\c\'>Odd label</label>'
            '<select id=\'a"b\\c\'><option>One</option></select>'
            '</div>'
        )
        questions = await QuestionExtractor().extract(page)

        assert [q.kind for q in questions] == [QuestionKind.MULTIPLE_CHOICE, QuestionKind.DROPDOWN]
        assert questions[1].stem == 'Odd label'

    async def test_blank_answer_still_counts_as_option(self):
        page = HtmlPage(
            '<div class="question multiple_choice_question">'
            '<div class="question_text">Pick</div>'
            '<div class="answer">Yes</div>'
            '<div class="answer">   </div>'
            '<div class="answer">No</div>'
            '</div>'
        )
        question = (await QuestionExtractor().extract(page))[0]

        assert len(question.options) == 3
        assert question.options == ('Yes', '', 'No')

    async def test_missing_parts_degrade_to_empty(self):
        page = HtmlPage('<div class="question multiple_choice_question"></div>')
        questions = await QuestionExtractor().extract(page)

        assert questions == [QuestionModel.multiple_choice('', [])]

    async def test_unknown_containers_are_skipped(self):
        page = HtmlPage('<div class="question essay_question"><div class="question_text">Why?</div></div>')
        assert await QuestionExtractor().extract(page) == []

    async def test_source_ref_points_at_container(self, quiz_page):
        question = (await QuestionExtractor().extract(quiz_page))[0]
        assert await question.source_ref.attribute('id') == 'question_1'

    async def test_failing_container_does_not_stop_extraction(self, quiz_page):
        async def broken(container, stem, profile):
            if 'matching_question' in await container.classes():
                raise RuntimeError('detached element')
            return None

        classifier = QuestionClassifier()
        classifier.register(broken, first=True)
        questions = await QuestionExtractor(classifier).extract(quiz_page)

        assert QuestionKind.MATCHING not in [q.kind for q in questions]
        assert len(questions) == 3

    async def test_page_failure_yields_no_questions(self):
        class BrokenPage(HtmlPage):
            async def query_all(self, selector):
                raise RuntimeError('page closed')

        assert await QuestionExtractor().extract(BrokenPage('')) == []


@pytest.mark.anyio
class TestQuestionClassifier:
    """Test cases for pluggable classification."""

    async def test_custom_profile(self):
        profile = MarkupProfile(container='.q', stem='h2', multiple_choice_marker='mc', answer='li')
        page = HtmlPage('<div class="q mc"><h2>Best fruit</h2><ul><li>Apple</li><li>Pear</li></ul></div>')

        questions = await QuestionExtractor(QuestionClassifier(profile)).extract(page)

        assert questions == [QuestionModel.multiple_choice('Best fruit', ['Apple', 'Pear'])]

    async def test_registered_classifier_recognizes_new_markup(self):
        async def true_false(container, stem, profile):
            if 'true_false_question' not in await container.classes():
                return None
            return QuestionModel.multiple_choice(stem, ['True', 'False'], source_ref=container)

        classifier = QuestionClassifier()
        classifier.register(true_false)
        page = HtmlPage('<div class="question true_false_question">'
                        '<div class="question_text">Sky is blue</div></div>')

        questions = await QuestionExtractor(classifier).extract(page)

        assert questions == [QuestionModel.multiple_choice('Sky is blue', ['True', 'False'])]
