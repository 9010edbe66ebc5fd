"""
Commits parsed fixes to the PR head branch
"""

import asyncio
import logging
from typing import Dict, Iterable

from pr_teammate.shared.models import CommitResult, FileFix, PRContext, RepositoryHost


def collapse_file_fixes(files: Iterable[FileFix]) -> Dict[str, str]:
    """Last content for a path wins; the path keeps its first position"""
    changes: Dict[str, str] = {}
    for fix in files:
        changes[fix.path] = fix.content
    return changes


class PatchApplier:
    """Turns fixes into exactly one commit on the head branch"""

    def __init__(self, github: RepositoryHost):
        self.github = github

    async def apply_single_file(
        self,
        pr_context: PRContext,
        file_path: str,
        content: str,
        message: str
    ) -> CommitResult:
        branch = pr_context.head_ref

        blob_id = await self.github.get_file_blob_id(file_path, branch)
        if blob_id is None:
            logging.info(f"{file_path} does not exist on {branch} - creating it")

        commit_sha = await self.github.update_file(file_path, content, message, branch, blob_id)
        logging.info(f"💾 Committed {file_path} as {commit_sha}")
        return CommitResult(commit_sha=commit_sha)

    async def apply_multi_file(
        self,
        pr_context: PRContext,
        files: Iterable[FileFix],
        message: str
    ) -> CommitResult:
        """
        Write every file in one commit.

        Blobs, the tree and the commit are unreachable until the final ref
        update, so a failure at any step leaves the branch untouched.
        """
        changes = collapse_file_fixes(files)
        if not changes:
            raise ValueError("No file changes to commit")

        branch = pr_context.head_ref
        parent_sha = pr_context.head_sha

        logging.info(f"💾 Applying {len(changes)} file change(s) to {branch}")

        base_tree_id = await self.github.get_commit_tree_id(parent_sha)

        paths = list(changes)
        blob_ids = await asyncio.gather(
            *(self.github.create_blob(changes[path]) for path in paths)
        )

        entries = [
            {"path": path, "mode": "100644", "type": "blob", "sha": blob_id}
            for path, blob_id in zip(paths, blob_ids)
        ]

        tree_id = await self.github.create_tree(base_tree_id, entries)
        commit_sha = await self.github.create_commit(message, tree_id, [parent_sha])
        await self.github.update_ref(branch, commit_sha)

        logging.info(f"✅ {branch} now at {commit_sha}")
        return CommitResult(commit_sha=commit_sha)
