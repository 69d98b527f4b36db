"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from langfuse_client.entities import ChatMessage, ChatPrompt, TextPrompt


class ChatMessageItem(BaseModel):
    """Single message of a chat prompt payload."""

    role: str = Field(..., description="Message role, e.g. 'system' or 'user'")
    content: str = Field(..., description="Message template text")

    model_config = {"extra": "allow"}


class PromptApiResponse(BaseModel):
    """Response DTO for GET /api/public/v2/prompts/{name}.

    ``prompt`` is a string for text prompts and a list of messages for chat
    prompts; ``type`` says which.
    """

    id: str | None = Field(None, description="Server-side prompt id")
    name: str = Field(..., description="Prompt name")
    version: int = Field(..., description="Resolved version number")
    type: str = Field(..., description="'text' or 'chat'")
    prompt: str | list[ChatMessageItem] = Field(..., description="Template text or chat messages")
    labels: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    config: dict[str, Any] | None = Field(default_factory=dict)
    created_at: str | None = Field(None, alias="createdAt")
    updated_at: str | None = Field(None, alias="updatedAt")

    model_config = {"extra": "allow", "populate_by_name": True}

    def to_text_prompt(self) -> TextPrompt:
        """Materialize a TextPrompt entity.

        Raises:
            ValueError: If the payload does not carry template text
        """
        if not isinstance(self.prompt, str):
            raise ValueError(f"Text prompt '{self.name}' payload has no template text")
        return TextPrompt(
            name=self.name,
            version=self.version,
            prompt=self.prompt,
            labels=tuple(self.labels),
            tags=tuple(self.tags),
            config=self.config or {},
        )

    def to_chat_prompt(self) -> ChatPrompt:
        """Materialize a ChatPrompt entity.

        Raises:
            ValueError: If the payload does not carry a message list
        """
        if not isinstance(self.prompt, list):
            raise ValueError(f"Chat prompt '{self.name}' payload has no message list")
        return ChatPrompt(
            name=self.name,
            version=self.version,
            messages=tuple(ChatMessage(role=m.role, content=m.content) for m in self.prompt),
            labels=tuple(self.labels),
            tags=tuple(self.tags),
            config=self.config or {},
        )


class ScoreResponse(BaseModel):
    """Response DTO for POST /api/public/scores."""

    id: str | None = Field(None, description="Server-assigned score id")

    model_config = {"extra": "allow"}
