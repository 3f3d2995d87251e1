"""Shared fixtures for quiz helper tests."""
import pytest
import requests

from quizhelper.page import HtmlPage


QUIZ_HTML = """
<html><body>
<form id="submit_quiz_form">
  <div class="question multiple_choice_question" id="question_1">
    <div class="question_text">2+2=?</div>
    <div class="answers">
      <div class="answer"><input type="radio" name="q1" value="1"> A</div>
      <div class="answer"><input type="radio" name="q1" value="2"> B</div>
      <div class="answer"><input type="radio" name="q1" value="3"> C</div>
    </div>
  </div>
  <div class="question matching_question" id="question_2">
    <div class="question_text">Match the animals</div>
    <div class="matching_term">Dog</div>
    <div class="matching_term">Cat</div>
    <div class="matching_definition">Canine</div>
    <div class="matching_definition">Feline</div>
  </div>
  <div class="question essay_question" id="question_3">
    <div class="question_text">Explain yourself</div>
    <textarea></textarea>
  </div>
  <div class="question multiple_dropdowns_question" id="question_4">
    <div class="question_text">Fill in the blanks</div>
    <div class="question_content">
      <label for="select_a">Capital of France</label>
      <select id="select_a">
        <option value=""></option>
        <option value="1">Paris</option>
        <option value="2">Lyon</option>
      </select>
      <select id="select_b">
        <option value="1">Red</option>
        <option value="2">Blue</option>
      </select>
      <span class="correct_answer">Paris</span>
    </div>
  </div>
  <button type="submit">Submit Quiz</button>
</form>
<div class="quiz-submission-confirmation">
  <p>Are you sure?</p>
  <button type="submit">Yes, submit</button>
</div>
</body></html>
"""


@pytest.fixture
def anyio_backend():
    return 'asyncio'


@pytest.fixture
def quiz_page():
    return HtmlPage(QUIZ_HTML)


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, data=None, reason='OK', invalid_json=False):
        self.status_code = status_code
        self.reason = reason
        self._data = data
        self._invalid_json = invalid_json

    def raise_for_status(self):
        if not 200 <= self.status_code < 300:
            raise requests.HTTPError(f"{self.status_code} {self.reason}", response=self)

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._data


class FakeSession:
    """Records posted requests and replays queued responses or errors."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'json': json, 'headers': headers, 'timeout': timeout})
        result = self.results.pop(0) if len(self.results) > 1 else self.results[0]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_session_factory():
    return FakeSession
