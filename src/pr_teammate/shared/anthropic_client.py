"""
Anthropic client for the Messages API
"""

import os
import logging
from anthropic import Anthropic


DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5"


class AnthropicClient:
    """Model provider backed by the Messages API"""

    def __init__(self, max_tokens: int = 8000):
        self.api_key = os.getenv("ANTHROPIC_API_KEY")
        self.model = os.getenv("ANTHROPIC_MODEL", DEFAULT_ANTHROPIC_MODEL)
        self.max_tokens = max_tokens

        if not self.api_key:
            raise ValueError("ANTHROPIC_API_KEY must be set")

        self.client = Anthropic(api_key=self.api_key)
        logging.info(f"🧠 AI Provider: anthropic ({self.model})")

    async def complete(self, prompt: str, system_message: str = None) -> str:
        """Send a prompt to Anthropic and return the response text"""
        try:
            request_params = {
                "model": self.model,
                "max_tokens": self.max_tokens,
                "messages": [{
                    "role": "user",
                    "content": prompt
                }],
            }

            if system_message:
                request_params["system"] = system_message

            logging.info(f"🚀 Calling Anthropic model {self.model}")
            message = self.client.messages.create(**request_params)

            return "".join(
                block.text for block in message.content if getattr(block, "type", "") == "text"
            )

        except Exception as e:
            logging.error(f"Error calling Anthropic: {str(e)}")
            raise
