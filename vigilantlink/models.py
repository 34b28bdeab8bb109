"""Pydantic request/response schemas for the VigilantLink API.

The Verdict is what the classifier returns; ScamReport is what the store
keeps. Field names are camelCase on the wire.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Classification(str, Enum):
    """Risk tier, ordered SAFE < WARNING < HIGH_RISK."""

    SAFE = "safe"
    WARNING = "warning"
    HIGH_RISK = "high_risk"

    @property
    def rank(self) -> int:
        return _RANK[self]

    def upgrade(self, other: "Classification") -> "Classification":
        """Return the higher of the two tiers. Never lowers."""
        return other if other.rank > self.rank else self

    def __lt__(self, other):
        if not isinstance(other, Classification):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Classification):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Classification):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Classification):
            return NotImplemented
        return self.rank >= other.rank


_RANK = {
    Classification.SAFE: 0,
    Classification.WARNING: 1,
    Classification.HIGH_RISK: 2,
}


class Analysis(BaseModel):
    """Counters derived while scoring a message."""

    suspiciousKeywords: int = Field(default=0)
    paymentKeywords: int = Field(default=0)
    safeIndicators: int = Field(default=0)
    hasLinks: bool = Field(default=False)
    hasPhoneNumber: bool = Field(default=False)


class Verdict(BaseModel):
    """Result of one classification call."""

    classification: Classification = Field(default=Classification.SAFE)
    riskScore: int = Field(default=0, ge=0, le=100)
    detectedPatterns: List[str] = Field(default_factory=list)
    analysis: Analysis = Field(default_factory=Analysis)


# Request models

class AnalyzeRequest(BaseModel):
    """Incoming payload on POST /analyze."""

    model_config = ConfigDict(extra="ignore")

    message: str = Field(...)


class SaveReportRequest(BaseModel):
    """Incoming payload on POST /reports. Mirrors the Verdict fields."""

    model_config = ConfigDict(extra="ignore")

    message: str = Field(...)
    classification: Classification = Field(...)
    riskScore: int = Field(..., ge=0, le=100)
    detectedPatterns: List[str] = Field(default_factory=list)


# Stored / response models

class ScamReport(BaseModel):
    id: Optional[str] = Field(default=None)
    message: str
    classification: Classification
    riskScore: int = Field(ge=0, le=100)
    detectedPatterns: List[str] = Field(default_factory=list)
    userId: Optional[str] = Field(default=None)
    reportedAt: int = Field(default=0, description="Epoch milliseconds")


class SaveReportResponse(BaseModel):
    id: str
    reportedAt: int
    userId: Optional[str] = None


class ScamStats(BaseModel):
    total: int = 0
    highRisk: int = 0
    warning: int = 0
    safe: int = 0


class PatternInfo(BaseModel):
    pattern: str
    description: str
    category: str
    weight: int
