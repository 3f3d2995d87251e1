"""Tests for the answer service client."""
import pytest
import requests

from conftest import FakeResponse
from quizhelper.api_utils import AnswerClient, ChatCompletionClient, build_answer_prompt
from quizhelper.errors import AnswerServiceError, ConfigError
from quizhelper.models import AnswerRequest, OutcomeStatus

ENDPOINT = 'http://answers.test/getAnswer'


class TestAnswerClient:
    """Test cases for AnswerClient."""

    def test_ok_answer_is_trimmed(self, fake_session_factory):
        session = fake_session_factory(FakeResponse(200, {'answer': '  B \n'}))
        client = AnswerClient(ENDPOINT, timeout=5, session=session)

        outcome = client.get_answer(AnswerRequest(stem='2+2=?', options=['A', 'B', 'C']), 3)

        assert outcome.status is OutcomeStatus.OK
        assert outcome.answer_text == 'B'
        assert outcome.question_index == 3
        assert session.calls == [{
            'url': ENDPOINT,
            'json': {'stem': '2+2=?', 'options': ['A', 'B', 'C']},
            'headers': None,
            'timeout': 5,
        }]

    def test_empty_request_makes_no_call(self, fake_session_factory):
        session = fake_session_factory(FakeResponse(200, {'answer': 'B'}))
        client = AnswerClient(ENDPOINT, session=session)

        outcome = client.get_answer(AnswerRequest(stem='', options=[]))

        assert outcome.status is OutcomeStatus.EMPTY
        assert len(session.calls) == 0

    def test_non_success_status_is_http_error(self, fake_session_factory):
        session = fake_session_factory(FakeResponse(500, {'error': 'boom'}, reason='Server Error'))
        outcome = AnswerClient(ENDPOINT, session=session).get_answer(AnswerRequest(stem='q'))

        assert outcome.status is OutcomeStatus.HTTP_ERROR
        assert outcome.http_status == 500
        assert outcome.answer_text is None
        assert len(session.calls) == 1

    @pytest.mark.parametrize('error', [
        requests.ConnectionError('refused'),
        requests.Timeout('timed out'),
    ])
    def test_transport_failure_is_network_error(self, fake_session_factory, error):
        session = fake_session_factory(error)
        outcome = AnswerClient(ENDPOINT, session=session).get_answer(AnswerRequest(stem='q'))

        assert outcome.status is OutcomeStatus.NETWORK_ERROR
        assert len(session.calls) == 1

    @pytest.mark.parametrize('response', [
        FakeResponse(200, {}),
        FakeResponse(200, {'answer': '   '}),
        FakeResponse(200, {'answer': None}),
        FakeResponse(200, ['B']),
        FakeResponse(200, invalid_json=True),
    ])
    def test_success_without_answer_is_empty(self, fake_session_factory, response):
        session = fake_session_factory(response)
        outcome = AnswerClient(ENDPOINT, session=session).get_answer(AnswerRequest(stem='q'))

        assert outcome.status is OutcomeStatus.EMPTY


class TestChatCompletionClient:
    """Test cases for the chat completion wrapper behind the answer service."""

    def test_prompt_lists_options(self):
        prompt = build_answer_prompt('2+2=?', ['3', '4'])
        assert prompt == ("Question: 2+2=?\n\nOptions:\n- 3\n- 4\n\n"
                          "Please choose the correct answer from the options provided.")

    def test_prompt_without_options(self):
        assert build_answer_prompt('Capital of France?', []).endswith("Provide the correct answer.")

    def test_complete_returns_trimmed_content(self, fake_session_factory):
        session = fake_session_factory(FakeResponse(200, {
            'choices': [{'message': {'content': ' 4 '}}],
        }))
        client = ChatCompletionClient(api_key='k', api_url='http://llm.test', model='m', session=session)

        assert client.complete('2+2=?', ['3', '4']) == '4'
        payload = session.calls[0]['json']
        assert payload['model'] == 'm'
        assert payload['max_tokens'] == 100
        assert payload['messages'][0]['role'] == 'system'
        assert session.calls[0]['headers']['Authorization'] == 'Bearer k'

    def test_rate_limit_is_retried(self, fake_session_factory, monkeypatch):
        sleeps = []
        monkeypatch.setattr('quizhelper.api_utils.time.sleep', sleeps.append)
        session = fake_session_factory(
            FakeResponse(429, reason='Too Many Requests'),
            FakeResponse(200, {'choices': [{'message': {'content': 'Paris'}}]}),
        )
        client = ChatCompletionClient(api_key='k', session=session)

        assert client.complete('Capital of France?') == 'Paris'
        assert len(session.calls) == 2
        assert sleeps == [2]

    def test_error_status_raises_after_retries(self, fake_session_factory, monkeypatch):
        monkeypatch.setattr('quizhelper.api_utils.time.sleep', lambda s: None)
        session = fake_session_factory(FakeResponse(500, reason='Server Error'))
        client = ChatCompletionClient(api_key='k', max_retries=2, session=session)

        with pytest.raises(AnswerServiceError):
            client.complete('q')
        assert len(session.calls) == 2

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv('OPENAI_API_KEY', raising=False)
        with pytest.raises(ConfigError):
            ChatCompletionClient().complete('q')

    def test_transport_failure_raises_after_retries(self, fake_session_factory, monkeypatch):
        monkeypatch.setattr('quizhelper.api_utils.time.sleep', lambda s: None)
        session = fake_session_factory(requests.ConnectionError('down'))
        client = ChatCompletionClient(api_key='k', max_retries=2, session=session)

        with pytest.raises(AnswerServiceError):
            client.complete('q')
        assert len(session.calls) == 2
