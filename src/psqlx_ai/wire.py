from __future__ import annotations

from pydantic import BaseModel


class OpenAIResponseMessage(BaseModel):
    content: str | None = None


class OpenAIChoice(BaseModel):
    message: OpenAIResponseMessage


class OpenAIChatResponse(BaseModel):
    choices: list[OpenAIChoice]


class AnthropicContentBlock(BaseModel):
    text: str


class AnthropicMessagesResponse(BaseModel):
    content: list[AnthropicContentBlock]
