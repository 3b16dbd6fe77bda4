import logging
from typing import Dict, Iterator, List, Optional
from together import Together
from volumechat.config.settings import (
    TOGETHER_API_KEY,
    LLM_MODEL,
    LLM_TEMPERATURE
)

logger = logging.getLogger(__name__)

class LLMService:
    def __init__(self, client: Optional[Together] = None, model: str = LLM_MODEL,
                 temperature: float = LLM_TEMPERATURE):
        self._client = client
        self.model = model
        self.temperature = temperature

    @property
    def client(self) -> Together:
        if self._client is None:
            self._client = Together(api_key=TOGETHER_API_KEY)
        return self._client

    def stream_chat(self, messages: List[Dict[str, str]]) -> Iterator[str]:
        """Stream a chat completion, yielding text fragments as they arrive"""
        logger.info(f"Streaming chat completion with {self.model} for {len(messages)} message(s)")
        stream = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=self.temperature,
            stream=True
        )

        for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta
            content = getattr(delta, "content", None) if delta else None
            if content:
                yield content
