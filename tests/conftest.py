"""
Shared fixtures: an in-memory repository host and a scripted model
"""

import pytest

from pr_teammate.shared.models import ChangedFile, CheckRunInfo, PRComment


class FakeRepositoryHost:
    """Records every read and write the pipeline makes"""

    def __init__(
        self,
        pr_number=42,
        head_ref="feature/login",
        head_sha="head000",
        files=None,
        diff="diff --git a/src/app.js b/src/app.js\n+console.log('hi')",
        changed_files=None,
        check_runs=None,
    ):
        self.pr_number = pr_number
        self.head_ref = head_ref
        self.head_sha = head_sha
        self.files = dict(files or {})
        self.diff = diff
        self.changed_files = changed_files if changed_files is not None else [
            ChangedFile(path=p, status="modified") for p in self.files
        ]
        self.check_runs = check_runs or []

        self.calls = []
        self.comments = []
        self.blobs = []
        self.trees = []
        self.commits = []
        self.ref_updates = []
        self.file_updates = []
        self.fail_on = set()

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")

    async def get_pr(self, pr_number):
        self._record("get_pr", pr_number)
        return {"number": pr_number, "head_ref": self.head_ref, "head_sha": self.head_sha}

    async def get_diff(self, pr_number):
        self._record("get_diff", pr_number)
        return self.diff

    async def list_changed_files(self, pr_number):
        self._record("list_changed_files", pr_number)
        return list(self.changed_files)

    async def list_review_comments(self, pr_number):
        self._record("list_review_comments", pr_number)
        return [PRComment(author="reviewer", body="nit", path="src/app.js")]

    async def list_issue_comments(self, pr_number):
        self._record("list_issue_comments", pr_number)
        return []

    async def get_file_content(self, path, ref):
        self._record("get_file_content", path, ref)
        return self.files.get(path)

    async def get_file_blob_id(self, path, ref):
        self._record("get_file_blob_id", path, ref)
        return f"blob-{path}" if path in self.files else None

    async def update_file(self, path, content, message, branch, blob_id=None):
        self._record("update_file", path)
        self.file_updates.append({
            "path": path, "content": content, "message": message,
            "branch": branch, "blob_id": blob_id,
        })
        self.files[path] = content
        return f"commit-{len(self.file_updates)}"

    async def get_commit_tree_id(self, commit_sha):
        self._record("get_commit_tree_id", commit_sha)
        return f"tree-of-{commit_sha}"

    async def create_blob(self, content):
        self._record("create_blob")
        self.blobs.append(content)
        return f"blob{len(self.blobs)}"

    async def create_tree(self, base_tree_id, entries):
        self._record("create_tree", base_tree_id)
        self.trees.append({"base": base_tree_id, "entries": entries})
        return f"tree{len(self.trees)}"

    async def create_commit(self, message, tree_id, parent_ids):
        self._record("create_commit", tree_id)
        self.commits.append({"message": message, "tree": tree_id, "parents": parent_ids})
        return f"newcommit{len(self.commits)}"

    async def update_ref(self, branch, commit_id):
        self._record("update_ref", branch, commit_id)
        self.ref_updates.append((branch, commit_id))

    async def post_comment(self, issue_number, body):
        self._record("post_comment", issue_number)
        self.comments.append((issue_number, body))

    async def list_check_runs(self, ref):
        self._record("list_check_runs", ref)
        return list(self.check_runs)

    def count(self, name):
        return sum(1 for call in self.calls if call[0] == name)


class ScriptedProvider:
    """Model provider that replays a fixed response"""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    async def complete(self, prompt, system_message=None):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def repo_host():
    return FakeRepositoryHost(files={"src/app.js": "function greet(name) {\n  return 'hi ' + name;\n}"})


@pytest.fixture
def failed_check():
    return CheckRunInfo(
        name="lint",
        conclusion="failure",
        title="2 errors",
        summary="ESLint found problems",
        text="SyntaxError: Unexpected token",
    )
