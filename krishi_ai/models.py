"""
Pydantic request/response models for the Krishi AI flows.

Field names are snake_case in Python; the camelCase aliases are the names
the web client sends and expects back.
"""
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator
from pydantic.alias_generators import to_camel


Level = Literal["High", "Medium", "Low"]
Severity = Literal["Low", "Medium", "High"]


class EndpointKind(str, Enum):
    CHAT = "chat"
    DIAGNOSIS = "diagnosis"
    RECOMMENDATIONS = "recommendations"


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _Request(_Schema):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# --- Chat Q&A ---

class ChatRequest(_Request):
    question: str = Field(description="The farming-related question to be answered.")
    language: Optional[str] = Field(
        default=None,
        description="The preferred language for the answer (e.g., Hindi, Punjabi, Tamil).",
    )

    @field_validator("question")
    @classmethod
    def question_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Question cannot be empty")
        return v


class ChatResponse(_Schema):
    answer: str = Field(description="The answer to the farming-related question.")

    @field_validator("answer")
    @classmethod
    def answer_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Answer cannot be empty")
        return v


# --- Crop Disease Diagnosis ---

class DiagnoseCropRequest(_Request):
    photo_data_uri: str = Field(description="A photo of the crop as a base64 data URI.")
    crop_type: str = Field(description="The type of crop being scanned.")


class DiagnoseCropResponse(_Schema):
    identification: str = Field(description="The identified condition or disease.")
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence level (0-1).")
    description: str = Field(description="Description of the symptoms observed.")
    organic_treatment: str = Field(description="Recommended organic treatment.")
    severity: Severity = Field(description="Urgency of the issue.")


# --- Personalized Recommendations ---

class RecommendationsRequest(_Request):
    soil_moisture: float
    soil_temperature: float
    soil_ph: float
    nutrient_level: Level
    weather_forecast: str
    crop_type: str
    location: str
    language: Optional[str] = None


class Recommendation(_Schema):
    priority: Level
    icon: str
    title: str
    action: str


class RecommendationsResponse(RootModel[List[Recommendation]]):
    """Ordered list of recommendations; an empty list is not a valid answer."""

    @field_validator("root")
    @classmethod
    def not_empty(cls, v: List[Recommendation]) -> List[Recommendation]:
        if not v:
            raise ValueError("Recommendations cannot be empty")
        return v

    def __iter__(self):
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Recommendation:
        return self.root[index]
