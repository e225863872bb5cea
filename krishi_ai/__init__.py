"""
Krishi AI - Gemini-backed assistant flows for farmers.

  - answer_farming_questions_via_chat: farming Q&A in the farmer's language
  - diagnose_crop_disease: disease/pest identification from a crop photo
  - generate_personalized_recommendations: actions from soil sensor data
"""
from .flows import (
    FlowOutcome,
    answer_farming_questions_via_chat,
    diagnose_crop_disease,
    generate_personalized_recommendations,
    run_chat_flow,
    run_diagnosis_flow,
    run_recommendations_flow,
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
from .structured_logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "FlowOutcome",
    "answer_farming_questions_via_chat",
    "diagnose_crop_disease",
    "generate_personalized_recommendations",
    "run_chat_flow",
    "run_diagnosis_flow",
    "run_recommendations_flow",
    "ChatRequest",
    "ChatResponse",
    "DiagnoseCropRequest",
    "DiagnoseCropResponse",
    "EndpointKind",
    "Recommendation",
    "RecommendationsRequest",
    "RecommendationsResponse",
    "configure_logging",
]
