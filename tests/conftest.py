"""Shared test doubles for the Krishi AI flows."""
import pytest

from krishi_ai import model_rotation
from krishi_ai.config import reset_settings


class RecordingSleep:
    """Stands in for asyncio.sleep and records the requested delays."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class FakeModelClient:
    """Scripted replacement for GeminiClient.

    Each call consumes the next scripted item: exceptions are raised, anything
    else is returned. The last item repeats once the script runs out.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.calls = []

    async def generate(self, prompt, output_type, **kwargs):
        self.calls.append({"prompt": prompt, "output_type": output_type, **kwargs})
        index = min(len(self.calls) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture(autouse=True)
def fresh_state():
    reset_settings()
    model_rotation.reset_rotation()
    yield
    reset_settings()
    model_rotation.reset_rotation()
