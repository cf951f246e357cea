"""
API models for decision narratives submitted for analysis.
"""

from enum import Enum

from pydantic import BaseModel


class ScenarioContext(str, Enum):
    """Situational pressure the decision maker was under."""

    NONE = "None"
    HIGH_STAKES = "High Stakes"
    TIME_PRESSURE = "Time Pressure"
    PEER_PRESSURE = "Peer Pressure"


class Decision(BaseModel):
    """Model representing a decision narrative to audit."""

    text: str
    context: ScenarioContext = ScenarioContext.NONE
