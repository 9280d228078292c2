"""Shared fixtures for résumé pipeline tests."""

import pytest

from cvmiracle.utils.llm import LLMProvider, LLMResponse

SCENARIO_A_TEXT = (
    "John Doe\n"
    "john@doe.com\n"
    "+33 6 12 34 56 78\n"
    "Experience\n"
    "Senior Engineer — Acme Corp\n"
    "2020 - Present\n"
    "- Shipped X\n"
    "- Led Y\n"
    "Education\n"
    "MSc CS — MIT"
)

TWO_COLUMN_TEXT = (
    "Jane Doe\n"
    "jane@doe.com\n"
    "SKILLS\n"
    "Python, SQL\n"
    "Airflow, dbt\n"
    "LANGUAGES\n"
    "French, English\n"
    "EXPERIENCE\n"
    "Data Engineer — Acme Corp 2019 - 2023\n"
    "- Built pipelines for analytics teams across Europe\n"
    "EDUCATION\n"
    "MSc Data Science — EPFL 2017 - 2019\n"
    "SUMMARY\n"
    "Engineer with a decade of experience in distributed data systems."
)


class FakeProvider(LLMProvider):
    """LLM provider returning canned responses in order, recording prompts."""

    _provider_prefix = "fake"
    _retry_message = "fake retry"

    def __init__(self, *responses, error: Exception = None):
        self._retryable_exception = TimeoutError
        self.responses = list(responses)
        self.error = error
        self.prompts = []
        self.update_model("test-model")

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        self.prompts.append(user_prompt)
        if self.error is not None:
            raise self.error
        content = self.responses.pop(0)
        return LLMResponse(content=content, model=self.model, input_tokens=10, output_tokens=20)


@pytest.fixture
def scenario_a_text():
    return SCENARIO_A_TEXT


@pytest.fixture
def two_column_text():
    return TWO_COLUMN_TEXT


@pytest.fixture
def fake_provider():
    """Factory for FakeProvider instances."""
    return FakeProvider
