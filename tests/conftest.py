import pytest

from core.config import Settings
from core.errors import GenerationError
from services.providers import ProviderTag, TextGenerator

PROVIDER_ENV = (
    "USE_OLLAMA", "ANTHROPIC_API_KEY", "OPENAI_API_KEY", "GOOGLE_API_KEY",
)


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch):
    for name in PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        return Settings(_env_file=None, **overrides)

    return _make


class FakeGenerator(TextGenerator):
    """Returns a canned reply, or raises it when it is an exception."""

    tag = ProviderTag.OPENAI

    def __init__(self, reply):
        super().__init__("fake-model")
        self.reply = reply
        self.prompts = []

    def _generate(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.reply, BaseException):
            raise self.reply
        return self.reply


@pytest.fixture
def fake_generator():
    return FakeGenerator


@pytest.fixture
def network_failure():
    return GenerationError("connection refused")
