"""
Gemini model client.

The one place that talks to the Gemini API. Flows hand it a rendered prompt,
optional inline image, and the output type they expect; it returns a
validated instance of that type or raises ModelCallError with the failure
already classified for the retry policy.
"""
import logging
from typing import Any, Optional, Tuple, Type, TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from .config import Settings, get_settings
from .errors import ConfigurationError, OutputValidationError, from_api_error
from .json_utils import extract_json
from .model_rotation import get_next_model

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# (mime_type, raw bytes)
Media = Tuple[str, bytes]


class GeminiClient:
    """Structured-output wrapper around the google-genai async API.

    Without explicit settings the client follows get_settings(), so a
    reset_settings() takes effect on the next call: the model choice at once,
    the timeout and API key by rebuilding the SDK client.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.client = None
        self._settings = settings
        self._client_settings: Optional[Settings] = None

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    def initialize(self, api_key: str = None):
        """Create the underlying genai.Client with timeout configuration."""
        settings = self.settings
        key = api_key or settings.api_key
        if not key:
            raise ConfigurationError(
                "No Gemini API key found. Set GOOGLE_GENAI_API_KEY, GEMINI_API_KEY "
                "or GOOGLE_API_KEY, or pass api_key to initialize()."
            )

        timeout_ms = int(settings.timeout_seconds * 1000)
        self.client = genai.Client(
            api_key=key,
            http_options=types.HttpOptions(timeout=timeout_ms)
        )
        self._client_settings = settings
        logger.info(f"Gemini client initialized (timeout: {settings.timeout_seconds}s)")

    def _is_stale(self) -> bool:
        # Clients assigned directly (e.g. in tests) are never rebuilt
        return self._client_settings is not None and self._client_settings is not self.settings

    def _select_model(self) -> str:
        return self.settings.model_override or get_next_model()

    async def generate(
        self,
        prompt: str,
        output_type: Type[T],
        *,
        system_instruction: Optional[str] = None,
        response_schema: Any = None,
        media: Optional[Media] = None,
        flow_name: Optional[str] = None,
    ) -> T:
        """Run one structured prompt call.

        Args:
            prompt: Fully rendered prompt text
            output_type: Pydantic model the response must validate against
            system_instruction: Optional system prompt
            response_schema: Schema sent to Gemini for constrained decoding
                (defaults to output_type)
            media: Optional (mime_type, bytes) image sent inline after the prompt
            flow_name: Used only for logging

        Returns:
            Validated instance of output_type

        Raises:
            ModelCallError: Transport/API failure, kind set from the upstream error
            OutputValidationError: Empty or schema-invalid response
        """
        if self.client is None or self._is_stale():
            self.initialize()

        model = self._select_model()
        contents: list = [prompt]
        if media is not None:
            mime_type, data = media
            contents.append(types.Part.from_bytes(data=data, mime_type=mime_type))

        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_schema=response_schema if response_schema is not None else output_type,
        )

        logger.info(f"[{flow_name or 'gemini'}] Calling {model}")
        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            raise from_api_error(e) from e

        return parse_output(response.text, output_type)


def parse_output(text: Optional[str], output_type: Type[T]) -> T:
    """Parse raw model text into output_type, raising OutputValidationError on failure."""
    data = extract_json(text or "")
    try:
        return output_type.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Model output failed {output_type.__name__} validation: {e.error_count()} error(s)")
        raise OutputValidationError(f"Response did not match {output_type.__name__}: {e}") from e


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------
_client_instance: Optional[GeminiClient] = None


def get_client() -> GeminiClient:
    """Get or create the client singleton."""
    global _client_instance
    if _client_instance is None:
        _client_instance = GeminiClient()
    return _client_instance
