"""Score service: builds and submits score records."""

import logging

from pydantic import ValidationError

from langfuse_client.config import SCORES_PATH
from langfuse_client.dto import ScoreRequest, ScoreResponse
from langfuse_client.entities import ScoreValue, resolve_score_value
from langfuse_client.errors import PreconditionError
from langfuse_client.protocols import Transport

logger = logging.getLogger(__name__)


def _require_text(field_name: str, value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PreconditionError(f"{field_name} must be a non-empty string", {field_name: value})
    return value


class ScoreService:
    """Submits scores for traces. Never cached, never retried."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def build_request(
        self,
        trace_id: str,
        name: str,
        value: ScoreValue,
        comment: str | None = None,
        observation_id: str | None = None,
    ) -> ScoreRequest:
        """Validate the inputs and build the request DTO.

        Raises:
            PreconditionError: If trace_id or name is empty, or value has an
                unsupported type or is not finite
        """
        _require_text("trace_id", trace_id)
        _require_text("name", name)

        try:
            wire_value, data_type = resolve_score_value(value)
        except (TypeError, ValueError) as e:
            raise PreconditionError(str(e), {"value": repr(value)}) from e

        try:
            return ScoreRequest(
                trace_id=trace_id,
                name=name,
                value=wire_value,
                comment=comment,
                observation_id=observation_id,
                data_type=data_type,
            )
        except ValidationError as e:
            raise PreconditionError(f"Invalid score: {e}") from e

    async def create_score(
        self,
        trace_id: str,
        name: str,
        value: ScoreValue,
        comment: str | None = None,
        observation_id: str | None = None,
    ) -> str | None:
        """Create a score linked to a trace.

        The data type follows from the value: bool is BOOLEAN (sent as 1/0),
        int/float is NUMERIC and str is CATEGORICAL.

        The API accepts scores for trace ids it has not seen, so success does
        not mean the trace exists.

        Args:
            trace_id: Trace to attach the score to
            name: Score name, e.g. "user-feedback"
            value: Score value
            comment: Optional comment
            observation_id: Optional observation (span) id within the trace

        Returns:
            The server-assigned score id, if the API returned one

        Raises:
            PreconditionError: If the inputs are invalid (no request is sent)
            LangfuseApiError: If the request fails
        """
        request = self.build_request(trace_id, name, value, comment, observation_id)

        payload = await self._transport.send("POST", SCORES_PATH, request.to_body())
        logger.debug(
            "Created %s score '%s' for trace %s",
            request.data_type.value.lower(),
            name,
            trace_id,
        )

        if isinstance(payload, dict):
            return ScoreResponse.model_validate(payload).id
        return None
