"""
AI PR Teammate - GitHub Action entry point

Classifies the triggering event, acknowledges it on the PR, runs the
comment-fix or CI-fix pipeline and reports the outcome.
"""

import os
import sys
import asyncio
import logging
from enum import Enum
from typing import Callable, Iterable, Optional

from pr_teammate.analyzers.ci_analyzer import CIAnalyzer
from pr_teammate.analyzers.code_fixer import CodeFixer
from pr_teammate.analyzers.trigger_classifier import classify_event
from pr_teammate.shared.ai_service import AIService, create_provider
from pr_teammate.shared.config import ActionSettings
from pr_teammate.shared.models import RepositoryHost, TaskResult, TaskType, TriggerEvent


ACK_MESSAGE = "🤖 AI PR Teammate is analyzing your request... Please wait."

FOOTER = "---\n*Powered by AI PR Teammate*"


class RunState(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    SKIPPED = "skipped"
    ACKNOWLEDGED = "acknowledged"
    PROCESSING = "processing"
    REPORTING = "reporting"


################################################################################
# Result comments
################################################################################

def format_success_comment(result: TaskResult) -> str:
    parts = [
        "✅ **AI PR Teammate completed the task!**",
        f"### Changes Made:\n{result.changes_summary}",
        f"### Explanation:\n{result.explanation}",
    ]
    if result.commit_sha:
        parts.append(f"📝 Commit: {result.commit_sha}")
    parts.append(FOOTER)
    return "\n\n".join(parts)


def format_failure_comment(result: TaskResult) -> str:
    return "\n\n".join([
        "⚠️ **AI PR Teammate encountered an issue**",
        result.error or "Unknown error",
        "Please review and try again, or handle this manually.",
        FOOTER,
    ])


def format_result_comment(result: TaskResult) -> str:
    if result.success:
        return format_success_comment(result)
    return format_failure_comment(result)


################################################################################
# Orchestrator
################################################################################

class PRTeammate:
    """
    Runs one event through classify -> acknowledge -> process -> report.

    At most two comments are posted per run: the acknowledgement and the
    result. A run whose acknowledgement fails stops before any model call.
    """

    def __init__(
        self,
        github: RepositoryHost,
        ai_service_factory: Callable[[], AIService],
        trigger_patterns: Iterable
    ):
        self.github = github
        self.ai_service_factory = ai_service_factory
        self.trigger_patterns = list(trigger_patterns)
        self.state = RunState.IDLE

    def _transition(self, state: RunState):
        logging.debug(f"State: {self.state.value} -> {state.value}")
        self.state = state

    async def handle_event(self, event_name: str, payload: dict) -> Optional[TaskResult]:
        """
        Returns:
            TaskResult for a processed event, None when the event was skipped
        """
        logging.info(f"Event: {event_name}")
        self._transition(RunState.CLASSIFYING)

        classification = classify_event(event_name, payload, self.trigger_patterns)

        if not classification.should_process:
            logging.info("⏭️ No AI trigger detected or not applicable. Skipping.")
            self._transition(RunState.SKIPPED)
            return None

        event = classification.trigger_event
        if event is None:
            logging.warning("⚠️ Could not determine PR number. Skipping.")
            self._transition(RunState.SKIPPED)
            return None

        logging.info(f"📋 Task Type: {event.kind.value}")
        logging.info(f"🎯 PR Number: {event.pr_number}")

        ai_service = self.ai_service_factory()

        await self.github.post_comment(event.pr_number, ACK_MESSAGE)
        self._transition(RunState.ACKNOWLEDGED)

        self._transition(RunState.PROCESSING)
        result = await self.process(event, ai_service)

        self._transition(RunState.REPORTING)
        await self.github.post_comment(event.pr_number, format_result_comment(result))

        if result.success:
            logging.info("✅ Task completed successfully!")
        else:
            logging.error(f"❌ Task failed ({result.error_kind.value if result.error_kind else 'unknown'}): {result.error}")

        self._transition(RunState.IDLE)
        return result

    async def process(self, event: TriggerEvent, ai_service: AIService) -> TaskResult:
        if event.kind == TaskType.CI_FAILURE:
            return await CIAnalyzer(self.github, ai_service).analyze_fix(event.pr_number)
        return await CodeFixer(self.github, ai_service).process_review_comment(event)


################################################################################
# Entry point
################################################################################

def set_failed(message: str):
    """Mark the workflow step as failed"""
    print(f"::error::{message}")


async def run_action(settings: ActionSettings) -> Optional[TaskResult]:
    from pr_teammate.shared.github_operations import GitHubOperations

    github = GitHubOperations(settings.repository, settings.github_token)
    teammate = PRTeammate(
        github,
        lambda: AIService(create_provider(settings.ai_provider, settings.demo_mode)),
        settings.trigger_patterns,
    )
    return await teammate.handle_event(settings.event_name, settings.load_event_payload())


def main() -> int:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(levelname)s %(message)s"
    )
    logging.info("🤖 AI PR Teammate activated!")

    try:
        settings = ActionSettings.from_env()
        asyncio.run(run_action(settings))
    except Exception as e:
        logging.error(f"💥 Fatal error: {str(e)}", exc_info=True)
        set_failed(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
