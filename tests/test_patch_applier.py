"""Tests for pr_teammate.shared.patch_applier."""

import pytest

from pr_teammate.shared.models import FileFix, PRContext
from pr_teammate.shared.patch_applier import PatchApplier, collapse_file_fixes

from conftest import FakeRepositoryHost


@pytest.fixture
def context():
    return PRContext(pr_number=3, head_ref="feature/x", head_sha="head000", diff_text="")


class TestSingleFile:

    @pytest.mark.asyncio
    async def test_updates_existing_file(self, context):
        host = FakeRepositoryHost(head_ref="feature/x", files={"a.js": "old"})
        result = await PatchApplier(host).apply_single_file(context, "a.js", "new", "msg")

        assert result.commit_sha == "commit-1"
        assert host.file_updates == [{
            "path": "a.js", "content": "new", "message": "msg",
            "branch": "feature/x", "blob_id": "blob-a.js",
        }]

    @pytest.mark.asyncio
    async def test_creates_missing_file(self, context):
        host = FakeRepositoryHost(head_ref="feature/x")
        await PatchApplier(host).apply_single_file(context, "new.js", "body", "msg")
        assert host.file_updates[0]["blob_id"] is None


class TestMultiFile:

    @pytest.mark.asyncio
    async def test_one_tree_one_commit_one_ref_update(self, context):
        host = FakeRepositoryHost()
        files = [FileFix("src/a.js", "A"), FileFix("src/b.js", "B")]

        result = await PatchApplier(host).apply_multi_file(context, files, "Fix CI")

        assert result.commit_sha == "newcommit1"
        assert host.blobs == ["A", "B"]
        assert len(host.trees) == 1
        assert host.trees[0]["base"] == "tree-of-head000"
        assert [e["path"] for e in host.trees[0]["entries"]] == ["src/a.js", "src/b.js"]
        assert host.commits == [{"message": "Fix CI", "tree": "tree1", "parents": ["head000"]}]
        assert host.ref_updates == [("feature/x", "newcommit1")]

    @pytest.mark.asyncio
    async def test_ref_update_is_last(self, context):
        host = FakeRepositoryHost()
        await PatchApplier(host).apply_multi_file(context, [FileFix("a", "1")], "m")
        names = [call[0] for call in host.calls]
        assert names[-1] == "update_ref"
        assert names.index("create_tree") > max(i for i, n in enumerate(names) if n == "create_blob")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failing", ["create_blob", "create_tree", "create_commit"])
    async def test_failure_leaves_branch_untouched(self, context, failing):
        host = FakeRepositoryHost()
        host.fail_on.add(failing)

        with pytest.raises(RuntimeError):
            await PatchApplier(host).apply_multi_file(context, [FileFix("a", "1"), FileFix("b", "2")], "m")

        assert host.ref_updates == []

    @pytest.mark.asyncio
    async def test_duplicate_paths_last_wins(self, context):
        host = FakeRepositoryHost()
        files = [FileFix("x.py", "first"), FileFix("y.py", "y"), FileFix("x.py", "last")]

        await PatchApplier(host).apply_multi_file(context, files, "m")

        entries = host.trees[0]["entries"]
        assert [e["path"] for e in entries] == ["x.py", "y.py"]
        assert host.blobs == ["last", "y"]

    @pytest.mark.asyncio
    async def test_empty_fix_rejected(self, context):
        host = FakeRepositoryHost()
        with pytest.raises(ValueError):
            await PatchApplier(host).apply_multi_file(context, [], "m")
        assert host.calls == []


def test_collapse_preserves_first_position():
    collapsed = collapse_file_fixes([FileFix("b", "1"), FileFix("a", "2"), FileFix("b", "3")])
    assert list(collapsed.items()) == [("b", "3"), ("a", "2")]
