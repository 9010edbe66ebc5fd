"""
Gathers the PR context a prompt is built from
"""

import re
import logging

from pr_teammate.shared.models import (
    CodeFixRequest,
    CIFixRequest,
    PRContext,
    RepositoryHost,
    TargetResolution,
    TaskType,
    TriggerEvent,
)


# `path/to/file.ext` quoted in backticks
BACKTICK_PATH_RE = re.compile(r"`([^`]+\.[a-zA-Z]+)`")
# bare dir/file.ext
BARE_PATH_RE = re.compile(r"\b([\w\-]+/[\w\-./]+\.\w+)\b")


def resolve_target(event: TriggerEvent, pr_context: PRContext) -> TargetResolution:
    """
    Pick the file a comment is about. First match wins:

    1. the path attached to an inline review comment (its diff hunk is the snippet)
    2. a backtick-quoted file name in the comment body
    3. a bare dir/file.ext token in the comment body
    4. the first changed file in the PR
    """
    meta = event.comment_meta
    if event.kind == TaskType.REVIEW_COMMENT and meta is not None and meta.path:
        snippet = meta.diff_hunk if (meta.line or meta.diff_hunk) else None
        return TargetResolution(file_path=meta.path, relevant_code_snippet=snippet)

    body = event.comment_body or ""

    match = BACKTICK_PATH_RE.search(body)
    if match:
        return TargetResolution(file_path=match.group(1))

    match = BARE_PATH_RE.search(body)
    if match:
        return TargetResolution(file_path=match.group(1))

    if pr_context.changed_files:
        path = pr_context.changed_files[0].path
        logging.warning(f"⚠️ No specific file mentioned, using first modified file: {path}")
        return TargetResolution(file_path=path)

    return TargetResolution()


class ContextAssembler:
    """Fetches the PR snapshot once and turns it into model requests"""

    def __init__(self, github: RepositoryHost):
        self.github = github

    async def fetch_pr_context(self, pr_number: int) -> PRContext:
        logging.info(f"📥 Fetching PR #{pr_number} context...")

        pr = await self.github.get_pr(pr_number)
        diff = await self.github.get_diff(pr_number)
        files = await self.github.list_changed_files(pr_number)
        review_comments = await self.github.list_review_comments(pr_number)
        issue_comments = await self.github.list_issue_comments(pr_number)

        return PRContext(
            pr_number=pr_number,
            head_ref=pr["head_ref"],
            head_sha=pr["head_sha"],
            diff_text=diff or "",
            changed_files=tuple(files),
            review_comments=tuple(review_comments),
            issue_comments=tuple(issue_comments),
        )

    async def read_target_file(self, target: TargetResolution, pr_context: PRContext):
        return await self.github.get_file_content(target.file_path, pr_context.head_ref)

    @staticmethod
    def code_fix_request(
        event: TriggerEvent,
        pr_context: PRContext,
        target: TargetResolution,
        file_content: str
    ) -> CodeFixRequest:
        return CodeFixRequest(
            review_comment=event.comment_body or "",
            file_content=file_content,
            file_path=target.file_path,
            diff=pr_context.diff_text,
            relevant_code=target.relevant_code_snippet,
        )

    @staticmethod
    def ci_fix_request(pr_context: PRContext, error_logs: str) -> CIFixRequest:
        return CIFixRequest(
            error_logs=error_logs,
            diff=pr_context.diff_text,
            changed_files=pr_context.changed_files,
        )
