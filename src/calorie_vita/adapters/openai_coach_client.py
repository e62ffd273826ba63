"""OpenAI Responses API client for coaching chat."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from calorie_vita.services.coaching import CoachClient


@dataclass
class OpenAICoachClient(CoachClient):
    """Coach client backed by the OpenAI Responses API."""

    client: AsyncOpenAI

    async def reply(
        self,
        *,
        model: str,
        store: bool,
        instructions: str,
        messages: list[dict[str, str]],
        max_output_tokens: int,
    ) -> str:
        response = await self.client.responses.create(
            model=model,
            instructions=instructions,
            input=messages,
            max_output_tokens=max_output_tokens,
            store=store,
        )
        output_text = response.output_text
        if not output_text or not output_text.strip():
            raise RuntimeError("OpenAI returned an empty response")
        return output_text
