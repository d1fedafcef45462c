"""Completion requester backed by the Anthropic Messages API."""

import logging

from anthropic import APIError, AsyncAnthropic

from notetutor.config import Settings
from notetutor.errors import UpstreamFailure

logger = logging.getLogger(__name__)


class CompletionClient:
    """
    Send an ordered list of {role, content} messages and return the generated text.

    "system" messages are lifted into the Messages API `system` parameter;
    the rest are sent in order. One request per call: no retry loop beyond
    what the SDK does on its own.
    """

    def __init__(self, api_key: str | None, model: str, *, client: AsyncAnthropic | None = None):
        self.model = model
        if client is None and api_key:
            client = AsyncAnthropic(api_key=api_key)
        self.client = client

    async def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """
        Request one completion.

        Returns the concatenated text blocks of the reply, which may be an
        empty string. Raises UpstreamFailure when the provider is not
        configured or the request fails.
        """
        if self.client is None:
            raise UpstreamFailure(
                detail="LLM provider not configured. Please set ANTHROPIC_API_KEY."
            )

        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        conversation = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] != "system"
        ]

        request: dict = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": conversation,
        }
        if system_parts:
            request["system"] = "\n\n".join(system_parts)

        try:
            response = await self.client.messages.create(**request)
        except APIError as e:
            logger.exception("Anthropic completion request failed")
            raise UpstreamFailure(detail=f"LLM request failed: {e}") from e

        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )


def build_completion_client(settings: Settings) -> CompletionClient:
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY is not set; AI endpoints will fail until it is configured")
    return CompletionClient(settings.anthropic_api_key, settings.llm_model)
