"""
Static fallback answers, one per endpoint.

Returned when the model path is exhausted so the UI always gets a valid,
safe response. Content is plain data here; fallback() validates it into the
endpoint's response model on every call, so callers never share an instance.
"""
from typing import Any, Dict, Union

from .models import (
    ChatResponse,
    DiagnoseCropResponse,
    EndpointKind,
    RecommendationsResponse,
)

FallbackResponse = Union[ChatResponse, DiagnoseCropResponse, RecommendationsResponse]

RESPONSE_MODELS = {
    EndpointKind.CHAT: ChatResponse,
    EndpointKind.DIAGNOSIS: DiagnoseCropResponse,
    EndpointKind.RECOMMENDATIONS: RecommendationsResponse,
}

FALLBACK_RESPONSES: Dict[EndpointKind, Any] = {
    EndpointKind.CHAT: {
        "answer": (
            "I'm a bit busy right now. Please try again in a minute or contact "
            "your local Krishi Vigyan Kendra for urgent help."
        ),
    },
    EndpointKind.DIAGNOSIS: {
        "identification": "Analysis Unavailable",
        "confidence": 0,
        "description": (
            "Unable to analyze image at this time due to service connectivity. "
            "Please ensure the image is clear and try again."
        ),
        "organicTreatment": "Consult a local expert.",
        "severity": "Low",
    },
    EndpointKind.RECOMMENDATIONS: [
        {
            "priority": "High",
            "icon": "💧",
            "title": "Manual Moisture Check",
            "action": "Quickly check soil moisture near roots and water if under 65%.",
        },
        {
            "priority": "Medium",
            "icon": "🌾",
            "title": "Routine Check",
            "action": "Sensor data looks typical. Continue standard irrigation cycles.",
        },
        {
            "priority": "Low",
            "icon": "☀️",
            "title": "Weather Watch",
            "action": "Monitor today’s forecast; delay irrigation if heavy rain is expected.",
        },
    ],
}


def fallback(endpoint_kind: Union[EndpointKind, str]) -> FallbackResponse:
    """Return the canned response for an endpoint."""
    kind = EndpointKind(endpoint_kind)
    return RESPONSE_MODELS[kind].model_validate(FALLBACK_RESPONSES[kind])
