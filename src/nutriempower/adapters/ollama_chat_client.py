"""Chat completions client for a local Ollama runtime."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutriempower.services.chat import ChatClient


@dataclass
class OllamaChatClient(ChatClient):
    """Chat client backed by Ollama's OpenAI-compatible API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, base_url: str, api_key: str = "ollama") -> "OllamaChatClient":
        """Create a client without SDK-level retries."""
        return cls(client=AsyncOpenAI(base_url=base_url, api_key=api_key, max_retries=0))

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_content: str,
        max_tokens: int,
    ) -> str | None:
        """Send one system + user turn and return the generated text."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            max_tokens=max_tokens,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
