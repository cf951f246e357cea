"""
Bias analysis result models and the placeholder results.
"""

from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field

Score = Annotated[int, Field(ge=0, le=100, strict=True)]


class _WireModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class DetectedBias(_WireModel):
    """A single cognitive bias found in the decision text."""

    name: str
    description: str
    confidence: Score
    trigger_phrase: str = Field(alias="triggerPhrase")

    @property
    def confidence_level(self) -> str:
        if self.confidence > 80:
            return "high"
        if self.confidence > 50:
            return "medium"
        return "low"


class BiasMetrics(_WireModel):
    """Audit metrics, each scored 0-100."""

    rationality: Score
    objectivity: Score
    completeness: Score


class AnalysisResult(_WireModel):
    """Response model for a complete bias analysis."""

    overall_score: Score = Field(alias="overallScore")
    summary: str
    biases: List[DetectedBias]
    metrics: BiasMetrics
    correction: str

    @property
    def score_band(self) -> str:
        if self.overall_score >= 80:
            return "high"
        if self.overall_score >= 50:
            return "medium"
        return "low"

    @property
    def is_fallback(self) -> bool:
        return self == FALLBACK_RESULT

    @property
    def is_awaiting_input(self) -> bool:
        return self == INITIAL_RESULT


_EMPTY_METRICS = BiasMetrics(rationality=0, objectivity=0, completeness=0)

INITIAL_RESULT = AnalysisResult(
    overall_score=0,
    summary="Awaiting input...",
    biases=[],
    metrics=_EMPTY_METRICS,
    correction="",
)

FALLBACK_RESULT = AnalysisResult(
    overall_score=0,
    summary="Error analyzing the text. Please try again.",
    biases=[],
    metrics=_EMPTY_METRICS,
    correction="N/A",
)
