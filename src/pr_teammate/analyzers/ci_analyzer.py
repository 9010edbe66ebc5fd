"""
CI failure analysis: collect failed check output, ask for a fix, commit it
"""

import re
import logging
from typing import Dict, List

from pr_teammate.analyzers.trigger_classifier import FAILURE_CONCLUSIONS
from pr_teammate.shared.ai_service import AIService
from pr_teammate.shared.context_assembler import ContextAssembler
from pr_teammate.shared.models import CheckRunInfo, FailureKind, RepositoryHost, TaskResult
from pr_teammate.shared.patch_applier import PatchApplier


ERROR_PATTERNS = {
    "syntax_error": re.compile(r"SyntaxError: (.+)"),
    "eslint_error": re.compile(r"error\s+(.+?)\s+@\w+"),
    "test_failure": re.compile(r"FAIL\s+(.+)"),
    "build_error": re.compile(r"ERROR in (.+)"),
    "type_error": re.compile(r"TypeError: (.+)"),
    "import_error": re.compile(r"Cannot find module ['\"](.+)['\"]"),
    "compilation_error": re.compile(r"Compilation failed"),
}


def is_failed_check(check: CheckRunInfo) -> bool:
    return check.conclusion in FAILURE_CONCLUSIONS


def extract_errors_from_checks(failed_checks: List[CheckRunInfo]) -> str:
    """Flatten check output and annotations into one log"""
    errors = []

    for check in failed_checks:
        if check.title:
            errors.append(f"[{check.name}] {check.title}")
        if check.summary:
            errors.append(check.summary)
        if check.text:
            errors.append(check.text)

        for annotation in check.annotations:
            errors.append(f"{annotation.path}:{annotation.start_line}: {annotation.message}")

    if not errors:
        errors.append(f"CI check failed: {', '.join(c.name for c in failed_checks)}")

    return "\n\n".join(errors)


def parse_error_patterns(error_log: str) -> Dict[str, List[str]]:
    """Group recognizable error lines by kind"""
    found = {}
    for kind, pattern in ERROR_PATTERNS.items():
        matches = [m.group(1) if m.groups() else m.group(0) for m in pattern.finditer(error_log)]
        if matches:
            found[kind] = matches
    return found


class CIAnalyzer:
    """CI-failure sub-pipeline"""

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

    async def analyze_fix(self, pr_number: int) -> TaskResult:
        logging.info("🔍 Analyzing CI failure...")

        try:
            pr_context = await self.assembler.fetch_pr_context(pr_number)
            check_runs = await self.github.list_check_runs(pr_context.head_sha)
        except Exception as e:
            logging.error(f"Error fetching CI context: {str(e)}")
            return TaskResult.failed(FailureKind.CONTEXT, f"Error analyzing CI: {str(e)}")

        failed_checks = [check for check in check_runs if is_failed_check(check)]
        if not failed_checks:
            return TaskResult.failed(FailureKind.RESOLUTION, "No failed CI checks found.")

        logging.info(f"❌ Found {len(failed_checks)} failed check(s)")

        error_logs = extract_errors_from_checks(failed_checks)
        if not error_logs:
            return TaskResult.failed(
                FailureKind.RESOLUTION,
                "Could not extract error information from CI logs."
            )

        patterns = parse_error_patterns(error_logs)
        if patterns:
            logging.info(f"🔍 Detected error patterns: {', '.join(sorted(patterns))}")

        logging.info("🧠 Calling AI to analyze CI failure...")
        try:
            analysis = await self.ai.analyze_ci_failure(
                self.assembler.ci_fix_request(pr_context, error_logs)
            )
        except Exception as e:
            logging.error(f"Error calling AI for CI analysis: {str(e)}")
            return TaskResult.failed(FailureKind.MODEL, f"Error analyzing CI: {str(e)}")

        if analysis.is_empty:
            return TaskResult.failed(
                FailureKind.MODEL,
                "AI could not determine a fix. Manual intervention may be required."
            )

        try:
            commit = await self.patch_applier.apply_multi_file(
                pr_context,
                analysis.files,
                f"🤖 AI PR Teammate: Fix CI failures\n\n{analysis.root_cause}"
            )
        except Exception as e:
            logging.error(f"Error committing CI fix: {str(e)}")
            return TaskResult.failed(FailureKind.WRITE, f"Error analyzing CI: {str(e)}")

        fixed_paths = list(dict.fromkeys(f.path for f in analysis.files))
        return TaskResult(
            success=True,
            changes_summary=f"Fixed {len(fixed_paths)} file(s):\n" + "\n".join(f"- {p}" for p in fixed_paths),
            explanation=f"**Root Cause:** {analysis.root_cause}\n\n{analysis.explanation}",
            commit_sha=commit.commit_sha,
        )
