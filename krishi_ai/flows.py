"""
Krishi AI flows: chat Q&A, crop-disease diagnosis, personalized recommendations.

Every flow follows the same path:
  1. Validate the request and render the prompt
  2. Call Gemini through the retry policy
  3. Return the validated model output, or the endpoint's static fallback

A flow never raises for a model or request failure; the caller always gets
a response that satisfies the endpoint schema. Use the run_* functions to
see whether the answer came from the model or the fallback.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Literal, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from .config import get_settings
from .fallbacks import fallback
from .gemini_client import GeminiClient, Media, get_client
from .input_sanitization import (
    parse_data_uri,
    sanitize_field,
    sanitize_forecast,
    sanitize_question,
)
from .models import (
    ChatRequest,
    ChatResponse,
    DiagnoseCropRequest,
    DiagnoseCropResponse,
    EndpointKind,
    Recommendation,
    RecommendationsRequest,
    RecommendationsResponse,
)
from .prompts import (
    CHAT_PROMPT,
    CHAT_SYSTEM_PROMPT,
    DIAGNOSIS_PROMPT,
    RECOMMENDATIONS_PROMPT,
    RECOMMENDATIONS_SYSTEM_PROMPT,
)
from .retry_policy import AttemptRecord, RetryPolicy
from .structured_logging import set_run_id

logger = logging.getLogger(__name__)

Req = TypeVar("Req", bound=BaseModel)
Resp = TypeVar("Resp", bound=BaseModel)

Source = Literal["model", "fallback"]
RenderFn = Callable[[Any], Tuple[str, Optional[Media]]]


@dataclass
class FlowOutcome(Generic[Resp]):
    """A flow's response plus where it came from."""
    response: Resp
    source: Source
    attempts: List[AttemptRecord] = field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return self.source == "fallback"


class Flow(Generic[Req, Resp]):
    """One endpoint: request/response schema, prompt, and retry budget.

    Args:
        name: Flow name used in logs
        kind: Endpoint identity; selects the fallback and the retry settings
        request_type: Pydantic model the request is coerced into
        response_type: Pydantic model the model output must validate against
        render: Turns a validated request into (prompt_text, media)
        system_instruction: Optional system prompt
        response_schema: Schema sent to Gemini (defaults to response_type)
    """

    def __init__(
        self,
        name: str,
        kind: EndpointKind,
        request_type: Type[Req],
        response_type: Type[Resp],
        render: RenderFn,
        system_instruction: Optional[str] = None,
        response_schema: Any = None,
    ):
        self.name = name
        self.kind = kind
        self.request_type = request_type
        self.response_type = response_type
        self.render = render
        self.system_instruction = system_instruction
        self.response_schema = response_schema

    def default_policy(self) -> RetryPolicy:
        settings = get_settings().retry_for(self.kind.value)
        return RetryPolicy(
            max_attempts=settings.max_attempts,
            base_delay=settings.base_delay,
            name=self.name,
        )

    def _fallback(self, attempts: List[AttemptRecord]) -> FlowOutcome[Resp]:
        logger.info(f"{self.name}: returning fallback after {len(attempts)} attempt(s)")
        return FlowOutcome(response=fallback(self.kind), source="fallback", attempts=attempts)

    async def run(
        self,
        request: Union[Req, Mapping[str, Any]],
        client: Optional[GeminiClient] = None,
        policy: Optional[RetryPolicy] = None,
    ) -> FlowOutcome[Resp]:
        """Run the flow and report whether the model or the fallback answered."""
        set_run_id()

        try:
            if not isinstance(request, self.request_type):
                request = self.request_type.model_validate(request)
            prompt, media = self.render(request)
        except (ValueError, TypeError) as e:
            logger.error(f"{self.name}: invalid request: {e}")
            return self._fallback([])

        client = client or get_client()
        policy = policy or self.default_policy()

        async def attempt():
            return await client.generate(
                prompt,
                self.response_type,
                system_instruction=self.system_instruction,
                response_schema=self.response_schema,
                media=media,
                flow_name=self.name,
            )

        outcome = await policy.execute(attempt, name=self.name)
        if outcome.succeeded:
            return FlowOutcome(response=outcome.result, source="model", attempts=outcome.attempts)
        return self._fallback(outcome.attempts)

    async def invoke(
        self,
        request: Union[Req, Mapping[str, Any]],
        client: Optional[GeminiClient] = None,
        policy: Optional[RetryPolicy] = None,
    ) -> Resp:
        outcome = await self.run(request, client=client, policy=policy)
        return outcome.response


# ---------------------------------------------------------------------------
# Prompt rendering
# ---------------------------------------------------------------------------

def _language(value: Optional[str]) -> str:
    return sanitize_field(value) or "English"


def render_chat_prompt(request: ChatRequest) -> Tuple[str, None]:
    question = sanitize_question(request.question)
    if not question:
        raise ValueError("Question is empty after sanitization")
    prompt = CHAT_PROMPT.format(
        language=_language(request.language),
        question=question,
    )
    return prompt, None


def render_diagnosis_prompt(request: DiagnoseCropRequest) -> Tuple[str, Media]:
    media = parse_data_uri(request.photo_data_uri)
    prompt = DIAGNOSIS_PROMPT.format(crop_type=sanitize_field(request.crop_type) or "crop")
    return prompt, media


def render_recommendations_prompt(request: RecommendationsRequest) -> Tuple[str, None]:
    prompt = RECOMMENDATIONS_PROMPT.format(
        crop_type=sanitize_field(request.crop_type),
        location=sanitize_field(request.location),
        language=_language(request.language),
        soil_moisture=request.soil_moisture,
        soil_temperature=request.soil_temperature,
        soil_ph=request.soil_ph,
        nutrient_level=request.nutrient_level,
        weather_forecast=sanitize_forecast(request.weather_forecast),
    )
    return prompt, None


# ---------------------------------------------------------------------------
# Flow definitions
# ---------------------------------------------------------------------------

chat_flow: Flow[ChatRequest, ChatResponse] = Flow(
    name="answerFarmingQuestionsViaChatFlow",
    kind=EndpointKind.CHAT,
    request_type=ChatRequest,
    response_type=ChatResponse,
    render=render_chat_prompt,
    system_instruction=CHAT_SYSTEM_PROMPT,
)

diagnosis_flow: Flow[DiagnoseCropRequest, DiagnoseCropResponse] = Flow(
    name="diagnoseCropDiseaseFlow",
    kind=EndpointKind.DIAGNOSIS,
    request_type=DiagnoseCropRequest,
    response_type=DiagnoseCropResponse,
    render=render_diagnosis_prompt,
)

recommendations_flow: Flow[RecommendationsRequest, RecommendationsResponse] = Flow(
    name="generatePersonalizedRecommendationsFlow",
    kind=EndpointKind.RECOMMENDATIONS,
    request_type=RecommendationsRequest,
    response_type=RecommendationsResponse,
    render=render_recommendations_prompt,
    system_instruction=RECOMMENDATIONS_SYSTEM_PROMPT,
    response_schema=list[Recommendation],
)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

async def answer_farming_questions_via_chat(request, client=None, policy=None) -> ChatResponse:
    """Answer a farming question in the requested language."""
    return await chat_flow.invoke(request, client=client, policy=policy)


async def diagnose_crop_disease(request, client=None, policy=None) -> DiagnoseCropResponse:
    """Analyze a crop photo and return a diagnosis with an organic treatment."""
    return await diagnosis_flow.invoke(request, client=client, policy=policy)


async def generate_personalized_recommendations(request, client=None, policy=None) -> RecommendationsResponse:
    """Three prioritized actions from soil sensor readings and the forecast."""
    return await recommendations_flow.invoke(request, client=client, policy=policy)


async def run_chat_flow(request, client=None, policy=None) -> FlowOutcome[ChatResponse]:
    return await chat_flow.run(request, client=client, policy=policy)


async def run_diagnosis_flow(request, client=None, policy=None) -> FlowOutcome[DiagnoseCropResponse]:
    return await diagnosis_flow.run(request, client=client, policy=policy)


async def run_recommendations_flow(request, client=None, policy=None) -> FlowOutcome[RecommendationsResponse]:
    return await recommendations_flow.run(request, client=client, policy=policy)
