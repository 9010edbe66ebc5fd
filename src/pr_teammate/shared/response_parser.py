"""
Parsing of model responses against the labeled-section contract

Both parsers are total: any string (or None) yields a result, with
placeholder text for missing sections and an empty fix when no code
block is found.
"""

import re
import logging
from typing import Iterable, Optional

from pr_teammate.shared.models import FileFix, MultiFileFix, SingleFileFix
from pr_teammate.shared.prompt_builder import (
    CHANGES_SUMMARY_LABEL,
    EXPLANATION_LABEL,
    FENCE,
    FILE_END,
    FILE_FIXES_LABEL,
    FILE_START,
    FIXED_CODE_LABEL,
    ROOT_CAUSE_LABEL,
)


NO_EXPLANATION = "No explanation provided"
NO_CHANGES_SUMMARY = "No changes summary provided"
NO_ROOT_CAUSE = "No root cause identified"

# Opening fence with an optional language tag, then the body up to the closing fence
_FENCE_OPEN = r"```[\w+.#-]*[ \t]*\r?\n"
_FENCED_BODY = _FENCE_OPEN + r"([\s\S]*?)```"
# A file body never runs into another block's markers
_FILE_BODY = (
    _FENCE_OPEN
    + r"((?:(?!" + re.escape(FILE_START) + "|" + re.escape(FILE_END) + r")[\s\S])*?)```"
)

FIXED_CODE_RE = re.compile(re.escape(FIXED_CODE_LABEL) + r"\s*" + _FENCED_BODY)
FILE_BLOCK_RE = re.compile(
    re.escape(FILE_START) + r"[ \t]*(.+?)\s*" + _FILE_BODY + r"\s*" + re.escape(FILE_END)
)


def _section(text: str, label: str, next_label: Optional[str] = None) -> Optional[str]:
    """Text after `label` up to `next_label` or end of text"""
    stop = rf"(?={re.escape(next_label)}|\Z)" if next_label else r"\Z"
    match = re.search(re.escape(label) + r"\s*([\s\S]*?)" + stop, text)
    if not match:
        return None
    return match.group(1).strip()


def _find_section(text: str, tail: str, label: str, next_label: Optional[str] = None) -> Optional[str]:
    """Prefer the section after the code, fall back to the whole response"""
    found = _section(tail, label, next_label)
    if found is None and tail is not text:
        found = _section(text, label, next_label)
    return found


def parse_code_fix_response(response: str) -> SingleFileFix:
    """Extract fixed code, explanation and change summary"""
    text = response if isinstance(response, str) else ""

    code_match = FIXED_CODE_RE.search(text)
    fixed_code = code_match.group(1).strip() if code_match else None
    tail = text[code_match.end():] if code_match else text

    if fixed_code is None:
        logging.warning("No FIXED_CODE block found in model response")

    return SingleFileFix(
        fixed_code=fixed_code or None,
        explanation=_find_section(text, tail, EXPLANATION_LABEL, CHANGES_SUMMARY_LABEL) or NO_EXPLANATION,
        changes_summary=_find_section(text, tail, CHANGES_SUMMARY_LABEL) or NO_CHANGES_SUMMARY,
    )


def parse_ci_fix_response(response: str) -> MultiFileFix:
    """Extract every file block, the explanation and the root cause"""
    text = response if isinstance(response, str) else ""

    matches = list(FILE_BLOCK_RE.finditer(text))
    files = [
        FileFix(path=match.group(1).strip(), content=match.group(2).strip())
        for match in matches
    ]

    # Sections after the last file block win over labels inside file contents
    tail = text[matches[-1].end():] if matches else text

    logging.info(f"Parsed {len(files)} file fix(es) from model response")

    return MultiFileFix(
        files=files,
        explanation=_find_section(text, tail, EXPLANATION_LABEL, ROOT_CAUSE_LABEL) or NO_EXPLANATION,
        root_cause=_find_section(text, tail, ROOT_CAUSE_LABEL) or NO_ROOT_CAUSE,
    )


def render_code_fix_response(fixed_code: str, explanation: str, changes: Iterable[str]) -> str:
    """Render a single-file fix in the contract the parser reads"""
    summary = "\n".join(f"- {change}" for change in changes)
    return (
        f"{FIXED_CODE_LABEL}\n{FENCE}\n{fixed_code}\n{FENCE}\n\n"
        f"{EXPLANATION_LABEL}\n{explanation}\n\n"
        f"{CHANGES_SUMMARY_LABEL}\n{summary}"
    )


def render_ci_fix_response(files: Iterable[FileFix], explanation: str, root_cause: str) -> str:
    """Render a multi-file fix in the contract the parser reads"""
    blocks = [
        f"{FILE_START} {f.path}\n{FENCE}\n{f.content}\n{FENCE}\n{FILE_END}"
        for f in files
    ]
    return (
        f"{FILE_FIXES_LABEL}\n" + "\n\n".join(blocks) + "\n\n"
        f"{EXPLANATION_LABEL}\n{explanation}\n\n"
        f"{ROOT_CAUSE_LABEL}\n{root_cause}"
    )
