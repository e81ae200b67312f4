"""
ESG score payload models.

Field aliases follow the provider's JSON keys.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ESGScores(BaseModel):
    """ESG score record returned by the scoring provider."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str = Field(..., min_length=1, description="Ticker symbol")
    esg_score: float = Field(..., alias="esgScore", description="Overall score")
    environment_score: float = Field(
        ..., alias="environmentScore", description="Environmental score"
    )
    social_score: float = Field(..., alias="socialScore", description="Social score")
    governance_score: float = Field(
        ..., alias="governanceScore", description="Governance score"
    )
    date: Optional[str] = Field(None, description="Provider reporting date")

    @property
    def pillar_average(self) -> float:
        """Get unweighted mean of the three pillar scores."""
        total = self.environment_score + self.social_score + self.governance_score
        return round(total / 3, 2)
