"""
Data models for the PR teammate pipeline
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Protocol


class TaskType(str, Enum):
    """Kind of work a trigger asks for"""
    COMMENT = "comment"
    REVIEW_COMMENT = "review_comment"
    CI_FAILURE = "ci_failure"


class FailureKind(str, Enum):
    """Where a failed run broke down"""
    RESOLUTION = "resolution"
    CONTEXT = "context"
    MODEL = "model"
    WRITE = "write"


@dataclass(frozen=True)
class CommentMeta:
    """Location attached to an inline review comment"""
    path: Optional[str] = None
    line: Optional[int] = None
    diff_hunk: Optional[str] = None


@dataclass(frozen=True)
class TriggerEvent:
    """One inbound event the pipeline acts on"""
    kind: TaskType
    pr_number: int
    comment_body: Optional[str] = None
    comment_meta: Optional[CommentMeta] = None


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying a webhook event"""
    should_process: bool
    task_type: Optional[TaskType] = None
    pr_number: Optional[int] = None
    comment_body: Optional[str] = None
    comment_meta: Optional[CommentMeta] = None

    @property
    def trigger_event(self) -> Optional[TriggerEvent]:
        if not self.should_process or not self.pr_number or self.task_type is None:
            return None
        return TriggerEvent(
            kind=self.task_type,
            pr_number=self.pr_number,
            comment_body=self.comment_body,
            comment_meta=self.comment_meta,
        )


@dataclass(frozen=True)
class ChangedFile:
    path: str
    status: str


@dataclass(frozen=True)
class PRComment:
    author: str
    body: str
    path: Optional[str] = None


@dataclass(frozen=True)
class PRContext:
    """Point-in-time snapshot of a pull request"""
    pr_number: int
    head_ref: str
    head_sha: str
    diff_text: str
    changed_files: tuple = ()
    review_comments: tuple = ()
    issue_comments: tuple = ()


@dataclass(frozen=True)
class TargetResolution:
    file_path: Optional[str] = None
    relevant_code_snippet: Optional[str] = None


@dataclass(frozen=True)
class CodeFixRequest:
    review_comment: str
    file_content: str
    file_path: str
    diff: str = ""
    relevant_code: Optional[str] = None


@dataclass(frozen=True)
class CIFixRequest:
    error_logs: str
    diff: str = ""
    changed_files: tuple = ()


@dataclass(frozen=True)
class CheckAnnotation:
    path: str
    start_line: Optional[int]
    message: str


@dataclass(frozen=True)
class CheckRunInfo:
    """A CI check run and whatever output it reported"""
    name: str
    conclusion: Optional[str]
    title: Optional[str] = None
    summary: Optional[str] = None
    text: Optional[str] = None
    annotations: tuple = ()


@dataclass(frozen=True)
class FileFix:
    path: str
    content: str


@dataclass
class SingleFileFix:
    """Parsed code-fix response"""
    fixed_code: Optional[str]
    explanation: str
    changes_summary: str

    @property
    def is_empty(self) -> bool:
        return not self.fixed_code


@dataclass
class MultiFileFix:
    """Parsed CI-fix response"""
    files: List[FileFix] = field(default_factory=list)
    explanation: str = ""
    root_cause: str = ""

    @property
    def is_empty(self) -> bool:
        return len(self.files) == 0


@dataclass(frozen=True)
class CommitResult:
    commit_sha: str


@dataclass
class TaskResult:
    """Terminal value of one run"""
    success: bool
    changes_summary: str = ""
    explanation: str = ""
    commit_sha: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[FailureKind] = None

    @classmethod
    def failed(cls, kind: FailureKind, error: str) -> "TaskResult":
        return cls(success=False, error=error, error_kind=kind)


class ModelProvider(Protocol):
    """Anything that turns a prompt into response text"""

    async def complete(self, prompt: str, system_message: str = None) -> str:
        ...


class RepositoryHost(Protocol):
    """Repository operations the pipeline needs from the hosting service"""

    async def get_pr(self, pr_number: int) -> dict: ...

    async def get_diff(self, pr_number: int) -> str: ...

    async def list_changed_files(self, pr_number: int) -> List[ChangedFile]: ...

    async def list_review_comments(self, pr_number: int) -> List[PRComment]: ...

    async def list_issue_comments(self, pr_number: int) -> List[PRComment]: ...

    async def get_file_content(self, path: str, ref: str) -> Optional[str]: ...

    async def get_file_blob_id(self, path: str, ref: str) -> Optional[str]: ...

    async def update_file(
        self, path: str, content: str, message: str, branch: str, blob_id: Optional[str]
    ) -> str: ...

    async def get_commit_tree_id(self, commit_sha: str) -> str: ...

    async def create_blob(self, content: str) -> str: ...

    async def create_tree(self, base_tree_id: str, entries: List[dict]) -> str: ...

    async def create_commit(self, message: str, tree_id: str, parent_ids: List[str]) -> str: ...

    async def update_ref(self, branch: str, commit_id: str) -> None: ...

    async def post_comment(self, issue_number: int, body: str) -> None: ...

    async def list_check_runs(self, ref: str) -> List[CheckRunInfo]: ...
