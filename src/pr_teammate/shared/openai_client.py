"""
OpenAI client for Azure OpenAI Service or the OpenAI API
"""

import os
import logging
from openai import OpenAI


REASONING_MODEL_PREFIXES = ("o1", "o3", "o4")


def is_reasoning_model(model: str) -> bool:
    model = model.lower()
    return model.startswith(REASONING_MODEL_PREFIXES) or "gpt-5" in model or "gpt5" in model


class OpenAIClient:
    """Model provider backed by chat completions"""

    def __init__(self, max_tokens: int = 8000):
        self.endpoint = os.getenv("OPENAI_ENDPOINT")
        self.api_key = os.getenv("OPENAI_API_KEY")
        self.model = os.getenv("OPENAI_MODEL", "gpt-4o")
        self.max_tokens = max_tokens

        if not self.api_key:
            raise ValueError("OPENAI_API_KEY must be set")

        if self.endpoint and "azure" in self.endpoint.lower():
            from openai import AzureOpenAI
            self.api_version = os.getenv("OPENAI_API_VERSION", "2024-08-01-preview")

            self.client = AzureOpenAI(
                azure_endpoint=self.endpoint,
                api_key=self.api_key,
                api_version=self.api_version
            )
        else:
            self.client = OpenAI(
                api_key=self.api_key
            )

        logging.info(f"🧠 AI Provider: openai ({self.model})")

    async def complete(self, prompt: str, system_message: str = None) -> str:
        """Send a prompt to OpenAI and return the response text"""
        try:
            messages = []

            if system_message:
                messages.append({
                    "role": "system",
                    "content": system_message
                })

            messages.append({
                "role": "user",
                "content": prompt
            })

            request_params = {
                "model": self.model,
                "messages": messages,
            }

            # Reasoning models reject max_tokens and custom temperature
            if is_reasoning_model(self.model):
                request_params["max_completion_tokens"] = self.max_tokens
            else:
                request_params["max_tokens"] = self.max_tokens
                request_params["temperature"] = 0.3

            logging.info(f"🚀 Calling OpenAI model {self.model}")
            response = self.client.chat.completions.create(**request_params)

            return response.choices[0].message.content or ""

        except Exception as e:
            logging.error(f"Error calling OpenAI: {str(e)}")
            raise
