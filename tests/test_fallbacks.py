"""Tests for the static fallback responses."""
import pytest

from krishi_ai.fallbacks import FALLBACK_RESPONSES, fallback
from krishi_ai.models import (
    ChatResponse,
    DiagnoseCropResponse,
    EndpointKind,
    RecommendationsResponse,
)


class TestFallback:

    def test_chat(self):
        result = fallback(EndpointKind.CHAT)
        assert isinstance(result, ChatResponse)
        assert result.answer == (
            "I'm a bit busy right now. Please try again in a minute or contact "
            "your local Krishi Vigyan Kendra for urgent help."
        )

    def test_diagnosis(self):
        result = fallback(EndpointKind.DIAGNOSIS)
        assert isinstance(result, DiagnoseCropResponse)
        assert result.model_dump(by_alias=True) == {
            "identification": "Analysis Unavailable",
            "confidence": 0.0,
            "description": (
                "Unable to analyze image at this time due to service connectivity. "
                "Please ensure the image is clear and try again."
            ),
            "organicTreatment": "Consult a local expert.",
            "severity": "Low",
        }

    def test_recommendations(self):
        result = fallback(EndpointKind.RECOMMENDATIONS)
        assert isinstance(result, RecommendationsResponse)
        assert len(result) == 3
        assert [r.priority for r in result] == ["High", "Medium", "Low"]
        assert [r.icon for r in result] == ["💧", "🌾", "☀️"]

    def test_accepts_string_kind(self):
        assert fallback("chat") == fallback(EndpointKind.CHAT)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            fallback("weather")

    def test_stable_across_calls(self):
        for kind in EndpointKind:
            assert fallback(kind).model_dump() == fallback(kind).model_dump()

    def test_returns_fresh_instances(self):
        first = fallback(EndpointKind.RECOMMENDATIONS)
        first.root[0].title = "Changed"
        assert fallback(EndpointKind.RECOMMENDATIONS)[0].title == "Manual Moisture Check"

    def test_every_endpoint_has_content(self):
        assert set(FALLBACK_RESPONSES) == set(EndpointKind)
