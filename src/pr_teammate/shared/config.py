"""
Action configuration read from the GitHub Actions environment
"""

import os
import json
import logging
from dataclasses import dataclass, field
from typing import List


DEFAULT_TRIGGER_PATTERNS = ["@ai-teammate", "@ai-bot", "@ai-pr-assistant"]


def _parse_patterns(raw: str) -> List[str]:
    patterns = [p.strip() for p in raw.split(",") if p.strip()]
    return patterns or list(DEFAULT_TRIGGER_PATTERNS)


@dataclass
class ActionSettings:
    """Settings for one action invocation"""
    github_token: str
    repository: str
    event_name: str = ""
    event_path: str = ""
    trigger_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_TRIGGER_PATTERNS))
    ai_provider: str = "anthropic"
    demo_mode: bool = False

    @classmethod
    def from_env(cls) -> "ActionSettings":
        token = os.getenv("GITHUB_TOKEN")
        repository = os.getenv("GITHUB_REPOSITORY")

        if not token:
            raise ValueError("GITHUB_TOKEN must be set")
        if not repository:
            raise ValueError("GITHUB_REPOSITORY must be set")

        return cls(
            github_token=token,
            repository=repository,
            event_name=os.getenv("GITHUB_EVENT_NAME", ""),
            event_path=os.getenv("GITHUB_EVENT_PATH", ""),
            trigger_patterns=_parse_patterns(os.getenv("AI_TRIGGER_PATTERNS", "")),
            ai_provider=os.getenv("AI_PROVIDER", "anthropic").strip().lower() or "anthropic",
            demo_mode=os.getenv("DEMO_MODE", "false").strip().lower() == "true",
        )

    def load_event_payload(self) -> dict:
        """Read the webhook payload GitHub wrote for this run"""
        if not self.event_path:
            logging.warning("GITHUB_EVENT_PATH not set - using empty payload")
            return {}

        with open(self.event_path, encoding="utf-8") as f:
            return json.load(f)
