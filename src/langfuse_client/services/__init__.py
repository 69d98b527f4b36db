"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Client  -> Service  -> Transport / Cache
    (facade) -> (Business) -> (Data Access)

Usage:
    ```python
    from langfuse_client.services import PromptService, ScoreService

    prompts = PromptService(transport=transport, cache=cache)
    scores = ScoreService(transport=transport)
    ```
"""

from .prompt_service import PromptService, build_prompt_path
from .score_service import ScoreService

__all__ = [
    "PromptService",
    "ScoreService",
    "build_prompt_path",
]
