"""
Decides whether an inbound webhook event should be acted on
"""

import re
from typing import Iterable, Optional, Pattern, Union, List

from pr_teammate.shared.models import Classification, CommentMeta, TaskType


# Only hard failures are worth an automated fix attempt. Shared with the
# CI analyzer so both agree on what a failed check is.
FAILURE_CONCLUSIONS = frozenset({"failure"})

COMMENT_EVENTS = {
    "issue_comment": TaskType.COMMENT,
    "pull_request_review_comment": TaskType.REVIEW_COMMENT,
}

SKIP = Classification(should_process=False)


def compile_trigger_patterns(patterns: Iterable[Union[str, Pattern]]) -> List[Pattern]:
    """Plain strings match literally, case-insensitive"""
    compiled = []
    for pattern in patterns:
        if isinstance(pattern, str):
            compiled.append(re.compile(re.escape(pattern), re.IGNORECASE))
        else:
            compiled.append(pattern)
    return compiled


def has_trigger(body: Optional[str], patterns: Iterable[Pattern]) -> bool:
    if not body:
        return False
    return any(pattern.search(body) for pattern in patterns)


def _comment_meta(comment: dict) -> Optional[CommentMeta]:
    if not comment.get("path"):
        return None
    return CommentMeta(
        path=comment.get("path"),
        line=comment.get("line"),
        diff_hunk=comment.get("diff_hunk"),
    )


def classify_event(
    event_name: str,
    payload: dict,
    patterns: Iterable[Union[str, Pattern]],
) -> Classification:
    """
    Classify a webhook event.

    Args:
        event_name: GitHub event name (e.g. "issue_comment", "check_run")
        payload: Webhook payload
        patterns: Trigger markers a comment must contain

    Returns:
        Classification; should_process is False for anything not actionable
    """
    payload = payload or {}

    if event_name in COMMENT_EVENTS:
        task_type = COMMENT_EVENTS[event_name]
        comment = payload.get("comment") or {}
        body = comment.get("body") or ""

        if task_type == TaskType.COMMENT:
            issue = payload.get("issue") or {}
            # issue_comment also fires on plain issues, which have no PR to act on
            pr_number = issue.get("number") if issue.get("pull_request") else None
            meta = None
        else:
            pr_number = (payload.get("pull_request") or {}).get("number")
            meta = _comment_meta(comment)

        triggered = has_trigger(body, compile_trigger_patterns(patterns))
        return Classification(
            should_process=triggered,
            task_type=task_type,
            pr_number=pr_number,
            comment_body=body,
            comment_meta=meta,
        )

    if event_name == "check_run":
        check_run = payload.get("check_run") or {}
        if check_run.get("conclusion") not in FAILURE_CONCLUSIONS:
            return SKIP

        prs = check_run.get("pull_requests") or []
        if not prs:
            return SKIP

        pr_number = prs[0].get("number")
        return Classification(
            should_process=True,
            task_type=TaskType.CI_FAILURE,
            pr_number=pr_number,
        )

    return SKIP
