"""
GitHub operations for reading PR context and committing fixes
"""

import os
import asyncio
import logging
from typing import List, Optional

from github import Auth, Github, GithubException, InputGitTreeElement

from pr_teammate.shared.models import ChangedFile, CheckAnnotation, CheckRunInfo, PRComment


class GitHubOperations:
    """Repository host backed by the GitHub REST API"""

    def __init__(self, repo_full_name: str = None, token: str = None):
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.repo_full_name = repo_full_name or os.getenv("GITHUB_REPOSITORY")

        if not self.token:
            raise ValueError("GITHUB_TOKEN must be set")
        if not self.repo_full_name:
            raise ValueError("GITHUB_REPOSITORY must be set")

        self.client = Github(auth=Auth.Token(self.token))
        self.repo = self.client.get_repo(self.repo_full_name)
        logging.info(f"GitHub client initialized for {self.repo_full_name}")

    # ------------------------------------------------------------------
    # Pull request context
    # ------------------------------------------------------------------

    async def get_pr(self, pr_number: int) -> dict:
        pr = self.repo.get_pull(pr_number)
        return {
            "number": pr.number,
            "head_ref": pr.head.ref,
            "head_sha": pr.head.sha,
        }

    async def get_diff(self, pr_number: int) -> str:
        """Unified diff assembled from the per-file patches"""
        pr = self.repo.get_pull(pr_number)
        parts = []
        for f in pr.get_files():
            old_path = f.previous_filename or f.filename
            header = f"diff --git a/{old_path} b/{f.filename}\n--- a/{old_path}\n+++ b/{f.filename}"
            parts.append(f"{header}\n{f.patch}" if f.patch else header)
        return "\n".join(parts)

    async def list_changed_files(self, pr_number: int) -> List[ChangedFile]:
        pr = self.repo.get_pull(pr_number)
        return [ChangedFile(path=f.filename, status=f.status) for f in pr.get_files()]

    async def list_review_comments(self, pr_number: int) -> List[PRComment]:
        pr = self.repo.get_pull(pr_number)
        return [
            PRComment(author=c.user.login if c.user else "", body=c.body or "", path=c.path)
            for c in pr.get_review_comments()
        ]

    async def list_issue_comments(self, pr_number: int) -> List[PRComment]:
        pr = self.repo.get_pull(pr_number)
        return [
            PRComment(author=c.user.login if c.user else "", body=c.body or "")
            for c in pr.get_issue_comments()
        ]

    # ------------------------------------------------------------------
    # File contents
    # ------------------------------------------------------------------

    def _get_file(self, path: str, ref: str):
        try:
            contents = self.repo.get_contents(path, ref=ref)
        except GithubException as e:
            if e.status == 404:
                return None
            raise

        # A directory listing is not a file
        if isinstance(contents, list):
            return None
        return contents

    async def get_file_content(self, path: str, ref: str) -> Optional[str]:
        contents = self._get_file(path, ref)
        if contents is None:
            logging.warning(f"File not found: {path}@{ref}")
            return None
        return contents.decoded_content.decode("utf-8")

    async def get_file_blob_id(self, path: str, ref: str) -> Optional[str]:
        contents = self._get_file(path, ref)
        return contents.sha if contents is not None else None

    async def update_file(
        self,
        path: str,
        content: str,
        message: str,
        branch: str,
        blob_id: Optional[str] = None
    ) -> str:
        """
        Create or update a single file with one commit

        Returns:
            SHA of the new commit
        """
        try:
            if blob_id:
                result = self.repo.update_file(
                    path=path,
                    message=message,
                    content=content,
                    sha=blob_id,
                    branch=branch
                )
                logging.info(f"Updated file: {path}")
            else:
                result = self.repo.create_file(
                    path=path,
                    message=message,
                    content=content,
                    branch=branch
                )
                logging.info(f"Created file: {path}")

            return result["commit"].sha

        except GithubException as e:
            logging.error(f"Error writing file {path}: {str(e)}")
            raise

    # ------------------------------------------------------------------
    # Git data (trees, blobs, commits, refs)
    # ------------------------------------------------------------------

    async def get_commit_tree_id(self, commit_sha: str) -> str:
        return self.repo.get_git_commit(commit_sha).tree.sha

    async def create_blob(self, content: str) -> str:
        # Runs in a worker thread so several blobs can be created at once
        blob = await asyncio.to_thread(self.repo.create_git_blob, content, "utf-8")
        return blob.sha

    async def create_tree(self, base_tree_id: str, entries: List[dict]) -> str:
        elements = [
            InputGitTreeElement(
                path=entry["path"],
                mode=entry.get("mode", "100644"),
                type=entry.get("type", "blob"),
                sha=entry["sha"]
            )
            for entry in entries
        ]
        base_tree = self.repo.get_git_tree(base_tree_id)
        tree = self.repo.create_git_tree(elements, base_tree)
        return tree.sha

    async def create_commit(self, message: str, tree_id: str, parent_ids: List[str]) -> str:
        tree = self.repo.get_git_tree(tree_id)
        parents = [self.repo.get_git_commit(sha) for sha in parent_ids]
        commit = self.repo.create_git_commit(message, tree, parents)
        return commit.sha

    async def update_ref(self, branch: str, commit_id: str) -> None:
        ref = self.repo.get_git_ref(f"heads/{branch}")
        ref.edit(sha=commit_id)
        logging.info(f"Moved {branch} to {commit_id}")

    # ------------------------------------------------------------------
    # Comments and checks
    # ------------------------------------------------------------------

    async def post_comment(self, issue_number: int, body: str) -> None:
        try:
            self.repo.get_issue(issue_number).create_comment(body)
            logging.info(f"Posted comment to #{issue_number}")
        except GithubException as e:
            logging.error(f"Error posting comment: {str(e)}")
            raise

    async def list_check_runs(self, ref: str) -> List[CheckRunInfo]:
        runs = []
        for run in self.repo.get_commit(ref).get_check_runs():
            output = run.output
            annotations = ()
            if output is not None and output.annotations_count:
                annotations = tuple(
                    CheckAnnotation(path=a.path, start_line=a.start_line, message=a.message)
                    for a in run.get_annotations()
                )

            runs.append(CheckRunInfo(
                name=run.name,
                conclusion=run.conclusion,
                title=output.title if output is not None else None,
                summary=output.summary if output is not None else None,
                text=output.text if output is not None else None,
                annotations=annotations,
            ))
        return runs
