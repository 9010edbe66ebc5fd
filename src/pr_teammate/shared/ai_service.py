"""
AI service: provider selection plus prompt/parse round trips
"""

import logging

from pr_teammate.shared.models import (
    CIFixRequest,
    CodeFixRequest,
    ModelProvider,
    MultiFileFix,
    SingleFileFix,
)
from pr_teammate.shared.prompt_builder import (
    CI_FIX_SYSTEM_MESSAGE,
    CODE_FIX_SYSTEM_MESSAGE,
    build_ci_fix_prompt,
    build_code_fix_prompt,
)
from pr_teammate.shared.response_parser import parse_ci_fix_response, parse_code_fix_response


SUPPORTED_PROVIDERS = ("anthropic", "openai", "mock")


def create_provider(provider: str = "anthropic", demo_mode: bool = False) -> ModelProvider:
    """
    Build the model provider for this run

    Args:
        provider: "anthropic", "openai" or "mock"
        demo_mode: Force the mock responder regardless of provider

    Raises:
        ValueError: Unknown provider or missing credentials
    """
    if demo_mode or provider == "mock":
        from pr_teammate.shared.mock_responder import MockResponder
        logging.info("🎭 Demo mode - responses come from the mock responder")
        return MockResponder()

    if provider == "anthropic":
        from pr_teammate.shared.anthropic_client import AnthropicClient
        return AnthropicClient()

    if provider == "openai":
        from pr_teammate.shared.openai_client import OpenAIClient
        return OpenAIClient()

    raise ValueError(f"Unsupported AI_PROVIDER '{provider}' (expected one of {', '.join(SUPPORTED_PROVIDERS)})")


class AIService:
    """Runs one prompt through the provider and parses the result"""

    def __init__(self, provider: ModelProvider):
        self.provider = provider

    async def generate_code_fix(self, request: CodeFixRequest) -> SingleFileFix:
        prompt = build_code_fix_prompt(request)
        response = await self.provider.complete(prompt, CODE_FIX_SYSTEM_MESSAGE)
        return parse_code_fix_response(response)

    async def analyze_ci_failure(self, request: CIFixRequest) -> MultiFileFix:
        prompt = build_ci_fix_prompt(request)
        response = await self.provider.complete(prompt, CI_FIX_SYSTEM_MESSAGE)
        return parse_ci_fix_response(response)
