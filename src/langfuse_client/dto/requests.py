"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field

from langfuse_client.entities import ScoreDataType


class ScoreRequest(BaseModel):
    """Request DTO for POST /api/public/scores.

    Serialize with ``model_dump(by_alias=True, exclude_none=True, mode="json")``
    so that absent optional fields are omitted from the body.
    """

    trace_id: str = Field(..., alias="traceId", description="Trace the score is attached to", min_length=1)
    name: str = Field(..., description="Score name, e.g. 'user-feedback'", min_length=1)
    value: int | float | str = Field(
        ...,
        description="Number for NUMERIC/BOOLEAN (1/0), string for CATEGORICAL",
    )
    comment: str | None = Field(None, description="Optional free-text comment")
    observation_id: str | None = Field(
        None,
        alias="observationId",
        description="Optional observation (span) within the trace",
    )
    data_type: ScoreDataType = Field(..., alias="dataType", description="NUMERIC, BOOLEAN or CATEGORICAL")

    model_config = {"populate_by_name": True}

    def to_body(self) -> dict:
        """Wire representation of the request."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
