"""Tests for pr_teammate.shared.prompt_builder."""

from pr_teammate.shared.models import ChangedFile, CIFixRequest, CodeFixRequest
from pr_teammate.shared.prompt_builder import (
    CI_PROMPT_INTRO,
    MAX_DIFF_CHARS,
    MAX_ERROR_LOG_CHARS,
    build_ci_fix_prompt,
    build_code_fix_prompt,
    truncate,
)


def test_truncate_keeps_prefix():
    text = "a" * 2999 + "bc" + "z" * 7000
    assert truncate(text, 3000) == "a" * 2999 + "b"
    assert truncate("short", 3000) == "short"
    assert truncate(None, 10) == ""


def test_caps():
    assert MAX_DIFF_CHARS == 3000
    assert MAX_ERROR_LOG_CHARS == 5000


class TestCodeFixPrompt:

    def make_request(self, **overrides):
        fields = dict(
            review_comment="@ai-teammate add validation",
            file_content="function f(x) { return x; }",
            file_path="src/f.js",
            diff="",
            relevant_code=None,
        )
        fields.update(overrides)
        return CodeFixRequest(**fields)

    def test_embeds_context_and_contract(self):
        prompt = build_code_fix_prompt(self.make_request(relevant_code="@@ hunk @@"))
        assert "@ai-teammate add validation" in prompt
        assert "**File Path:**\nsrc/f.js" in prompt
        assert "function f(x) { return x; }" in prompt
        assert "@@ hunk @@" in prompt
        assert prompt.index("FIXED_CODE:") < prompt.index("EXPLANATION:") < prompt.index("CHANGES_SUMMARY:")

    def test_optional_sections_omitted(self):
        prompt = build_code_fix_prompt(self.make_request())
        assert "Relevant Code Context" not in prompt
        assert "PR Diff Context" not in prompt

    def test_diff_truncated_to_cap(self):
        diff = "d" * 10000
        prompt = build_code_fix_prompt(self.make_request(diff=diff))
        assert "d" * 3000 in prompt
        assert "d" * 3001 not in prompt

    def test_deterministic(self):
        request = self.make_request(diff="x")
        assert build_code_fix_prompt(request) == build_code_fix_prompt(request)

    def test_not_mistaken_for_ci_prompt(self):
        assert not build_code_fix_prompt(self.make_request()).startswith(CI_PROMPT_INTRO)


class TestCIFixPrompt:

    def test_logs_and_diff_truncated(self):
        request = CIFixRequest(error_logs="e" * 20000, diff="d" * 10000, changed_files=())
        prompt = build_ci_fix_prompt(request)
        assert "e" * 5000 in prompt and "e" * 5001 not in prompt
        assert "d" * 3000 in prompt and "d" * 3001 not in prompt

    def test_lists_files_and_contract(self):
        request = CIFixRequest(
            error_logs="boom",
            diff="",
            changed_files=(ChangedFile("src/a.js", "modified"), ChangedFile("b.py", "added")),
        )
        prompt = build_ci_fix_prompt(request)
        assert prompt.startswith(CI_PROMPT_INTRO)
        assert "- src/a.js (modified)\n- b.py (added)" in prompt
        assert "---FILE:" in prompt and "---END_FILE" in prompt
        assert prompt.index("EXPLANATION:") < prompt.index("ROOT_CAUSE:")
