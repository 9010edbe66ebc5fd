"""
Review-comment fixes: resolve the target file, ask for a fix, commit it
"""

import logging

from pr_teammate.shared.ai_service import AIService
from pr_teammate.shared.context_assembler import ContextAssembler, resolve_target
from pr_teammate.shared.models import FailureKind, RepositoryHost, TaskResult, TriggerEvent
from pr_teammate.shared.patch_applier import PatchApplier


DEFAULT_COMMIT_SUBJECT = "Apply code review feedback"


def commit_message_for(changes_summary: str) -> str:
    first_line = changes_summary.strip().split("\n")[0].lstrip("-* ").strip() if changes_summary else ""
    return f"🤖 AI PR Teammate: {first_line or DEFAULT_COMMIT_SUBJECT}"


class CodeFixer:
    """Comment-fix sub-pipeline"""

    def __init__(
        self,
        github: RepositoryHost,
        ai_service: AIService,
        assembler: ContextAssembler = None,
        patch_applier: PatchApplier = None
    ):
        self.github = github
        self.ai = ai_service
        self.assembler = assembler or ContextAssembler(github)
        self.patch_applier = patch_applier or PatchApplier(github)

    async def process_review_comment(self, event: TriggerEvent) -> TaskResult:
        logging.info("🔧 Processing review comment...")

        try:
            pr_context = await self.assembler.fetch_pr_context(event.pr_number)
        except Exception as e:
            logging.error(f"Error fetching PR context: {str(e)}")
            return TaskResult.failed(FailureKind.CONTEXT, f"Error: {str(e)}")

        target = resolve_target(event, pr_context)
        if not target.file_path:
            return TaskResult.failed(
                FailureKind.RESOLUTION,
                "Could not determine which file to fix. "
                "Please mention the file path or use inline comments."
            )

        logging.info(f"📝 Target file: {target.file_path}")

        try:
            file_content = await self.assembler.read_target_file(target, pr_context)
        except Exception as e:
            logging.error(f"Error reading {target.file_path}: {str(e)}")
            return TaskResult.failed(FailureKind.CONTEXT, f"Error: {str(e)}")

        if not file_content:
            return TaskResult.failed(
                FailureKind.RESOLUTION,
                f"Could not read file: {target.file_path}"
            )

        logging.info("🧠 Calling AI to generate fix...")
        try:
            fix = await self.ai.generate_code_fix(
                self.assembler.code_fix_request(event, pr_context, target, file_content)
            )
        except Exception as e:
            logging.error(f"Error calling AI for code fix: {str(e)}")
            return TaskResult.failed(FailureKind.MODEL, f"Error: {str(e)}")

        if fix.is_empty:
            return TaskResult.failed(
                FailureKind.MODEL,
                "AI could not generate a fix. Please provide more details."
            )

        logging.info("💾 Applying fix...")
        try:
            commit = await self.patch_applier.apply_single_file(
                pr_context,
                target.file_path,
                fix.fixed_code,
                commit_message_for(fix.changes_summary)
            )
        except Exception as e:
            logging.error(f"Error committing fix: {str(e)}")
            return TaskResult.failed(FailureKind.WRITE, f"Error: {str(e)}")

        return TaskResult(
            success=True,
            changes_summary=fix.changes_summary,
            explanation=fix.explanation,
            commit_sha=commit.commit_sha,
        )
