"""Unit tests for LLM provider selection, response parsing and retry behavior."""

from types import SimpleNamespace

import pytest

from cvmiracle.utils import llm
from cvmiracle.utils.llm import LLMProvider, LLMResponse, get_provider, parse_array_response, parse_object_response


class FlakyProvider(LLMProvider):
    """Fails with TimeoutError a fixed number of times, then succeeds."""

    _provider_prefix = "flaky"
    _retry_message = "Timed out"

    def __init__(self, failures: int):
        self._retryable_exception = TimeoutError
        self.failures = failures
        self.calls = 0
        self.update_model("m1")

    def _call_api(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        self.calls += 1
        if self.calls <= self.failures:
            raise TimeoutError("slow")
        return LLMResponse(content="{}", model=self.model, input_tokens=1, output_tokens=1)


@pytest.fixture
def no_sleep(monkeypatch):
    delays = []
    monkeypatch.setattr(llm.time, "sleep", delays.append)
    return delays


@pytest.mark.unit
def test_retry_then_success(no_sleep):
    """Test exponential backoff before a successful call."""
    provider = FlakyProvider(failures=2)

    response = provider.generate("system", "user")

    assert response.content == "{}"
    assert provider.calls == 3
    assert no_sleep == [1.0, 2.0]
    assert provider.name == "flaky/m1"


@pytest.mark.unit
def test_retry_gives_up(no_sleep):
    """Test that the last retryable error is raised."""
    provider = FlakyProvider(failures=10)
    with pytest.raises(TimeoutError):
        provider.generate("system", "user")
    assert provider.calls == llm.MAX_RETRIES


class RecordingEndpoint:
    """Stands in for an SDK create() endpoint, returning a canned reply."""

    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return self.reply


class FakeAnthropic:
    def __init__(self, api_key):
        self.api_key = api_key
        self.messages = RecordingEndpoint(
            SimpleNamespace(
                content=[SimpleNamespace(text='{"name": "Jane"}')],
                usage=SimpleNamespace(input_tokens=12, output_tokens=5),
            )
        )


class FakeOpenAI:
    def __init__(self, api_key):
        self.api_key = api_key
        self.chat = SimpleNamespace(
            completions=RecordingEndpoint(
                SimpleNamespace(
                    choices=[SimpleNamespace(message=SimpleNamespace(content='{"name": "Jane"}'))],
                    usage=SimpleNamespace(prompt_tokens=20, completion_tokens=7),
                )
            )
        )


@pytest.fixture
def llm_env(monkeypatch):
    anthropic = pytest.importorskip("anthropic")
    openai = pytest.importorskip("openai")
    monkeypatch.setattr(anthropic, "Anthropic", FakeAnthropic)
    monkeypatch.setattr(openai, "OpenAI", FakeOpenAI)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("LLM_MODEL", raising=False)
    return monkeypatch


@pytest.mark.unit
def test_get_provider_anthropic_from_env(llm_env):
    """Test that LLM_PROVIDER=anthropic selects the Claude provider and maps its reply."""
    llm_env.setenv("LLM_PROVIDER", "anthropic")

    provider = get_provider()
    response = provider.generate("Extract JSON.", "Jane Doe")

    assert isinstance(provider, llm.AnthropicProvider)
    assert provider.name == "anthropic/claude-sonnet-4-20250514"
    assert provider.client.api_key == "sk-ant-test"
    assert response == LLMResponse(
        content='{"name": "Jane"}', model=provider.model, input_tokens=12, output_tokens=5
    )
    request = provider.client.messages.calls[0]
    assert request["system"] == "Extract JSON."
    assert request["messages"] == [{"role": "user", "content": "Jane Doe"}]
    assert request["max_tokens"] == llm.MAX_OUTPUT_TOKENS


@pytest.mark.unit
def test_get_provider_openai_with_model_override(llm_env):
    """Test that the OpenAI provider honors LLM_MODEL and asks for a JSON object."""
    llm_env.setenv("LLM_PROVIDER", "OpenAI")
    llm_env.setenv("LLM_MODEL", "gpt-4o")

    provider = get_provider()
    response = provider.generate("Extract JSON.", "Jane Doe")

    assert isinstance(provider, llm.OpenAIProvider)
    assert provider.name == "openai/gpt-4o"
    assert response.content == '{"name": "Jane"}'
    assert (response.input_tokens, response.output_tokens) == (20, 7)
    request = provider.client.chat.completions.calls[0]
    assert request["model"] == "gpt-4o"
    assert request["response_format"] == {"type": "json_object"}
    assert request["messages"][0] == {"role": "system", "content": "Extract JSON."}


@pytest.mark.unit
@pytest.mark.parametrize("name, key", [("anthropic", "ANTHROPIC_API_KEY"), ("openai", "OPENAI_API_KEY")])
def test_get_provider_requires_api_key(llm_env, name, key):
    """Test that a selected provider without its API key is rejected."""
    llm_env.delenv(key)
    with pytest.raises(ValueError, match=key):
        get_provider(name)


@pytest.mark.unit
def test_get_provider_unknown():
    """Test that an unknown provider name is rejected."""
    with pytest.raises(ValueError, match="Unknown provider"):
        get_provider("bogus")


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"a": 1}', {"a": 1}),
        ('Sure!\n```json\n{"a": 1}\n```', {"a": 1}),
        ("[1, 2]", None),
        ("no json", None),
        ("{broken", None),
    ],
)
def test_parse_object_response(text, expected):
    """Test JSON object recovery."""
    assert parse_object_response(text) == expected


@pytest.mark.unit
def test_parse_array_response_json_and_fallback():
    """Test JSON arrays and the line-based fallback."""
    assert parse_array_response('Result: ["a", "b"]') == ["a", "b"]
    assert parse_array_response("- first\n- second\n- third", fallback_count=2) == ["first", "second"]
