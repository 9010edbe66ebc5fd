"""
Prompt templates for code-fix and CI-fix requests
"""

from pr_teammate.shared.models import CodeFixRequest, CIFixRequest


MAX_DIFF_CHARS = 3000
MAX_ERROR_LOG_CHARS = 5000

# Markers shared with the response parser
FIXED_CODE_LABEL = "FIXED_CODE:"
EXPLANATION_LABEL = "EXPLANATION:"
CHANGES_SUMMARY_LABEL = "CHANGES_SUMMARY:"
ROOT_CAUSE_LABEL = "ROOT_CAUSE:"
FILE_FIXES_LABEL = "FILE_FIXES:"
FILE_START = "---FILE:"
FILE_END = "---END_FILE"

FENCE = "```"

CI_PROMPT_INTRO = "You are an expert at debugging CI/CD failures."

CODE_FIX_SYSTEM_MESSAGE = (
    "You are an expert AI code reviewer and developer. "
    "Always answer in the exact response format you are given."
)

CI_FIX_SYSTEM_MESSAGE = (
    "You are an expert at debugging CI/CD failures. "
    "Always answer in the exact response format you are given."
)


def truncate(text: str, limit: int) -> str:
    """Keep the first `limit` characters"""
    if not text:
        return ""
    return text[:limit]


def build_code_fix_prompt(request: CodeFixRequest) -> str:
    sections = [
        "You are an expert AI code reviewer and developer. "
        "You've been asked to fix code based on a review comment.",
        f"**Review Comment:**\n{request.review_comment}",
        f"**File Path:**\n{request.file_path}",
        f"**Current File Content:**\n{FENCE}\n{request.file_content}\n{FENCE}",
    ]

    if request.relevant_code:
        sections.append(f"**Relevant Code Context:**\n{FENCE}\n{request.relevant_code}\n{FENCE}")

    if request.diff:
        sections.append(f"**PR Diff Context:**\n{FENCE}diff\n{truncate(request.diff, MAX_DIFF_CHARS)}\n{FENCE}")

    sections.append("""**Your Task:**
1. Understand the review comment and what needs to be fixed
2. Generate the complete fixed version of the file
3. Explain what you changed and why
4. Ensure the code follows best practices:
   - Proper error handling
   - Input validation
   - Loading states (for UI components)
   - Security considerations
   - Performance optimization
   - Clear comments where needed""")

    sections.append(f"""**Response Format:**
Please respond in this exact format:

{FIXED_CODE_LABEL}
{FENCE}
[Complete fixed file content here]
{FENCE}

{EXPLANATION_LABEL}
[Brief explanation of changes made]

{CHANGES_SUMMARY_LABEL}
- [List of specific changes]
- [One per line]
""")

    return "\n\n".join(sections)


def build_ci_fix_prompt(request: CIFixRequest) -> str:
    modified = "\n".join(f"- {f.path} ({f.status})" for f in request.changed_files)

    return f"""{CI_PROMPT_INTRO} Analyze the following CI error and suggest fixes.

**Error Logs:**
{FENCE}
{truncate(request.error_logs, MAX_ERROR_LOG_CHARS)}
{FENCE}

**PR Changes:**
{FENCE}diff
{truncate(request.diff, MAX_DIFF_CHARS)}
{FENCE}

**Modified Files:**
{modified}

**Your Task:**
1. Identify the root cause of the CI failure
2. Determine which file(s) need to be fixed
3. Generate the complete fixed version of those files
4. Explain what caused the failure and how you fixed it

**Response Format:**
{FILE_FIXES_LABEL}
{FILE_START} [filepath]
{FENCE}
[Complete fixed file content]
{FENCE}
{FILE_END}

[Repeat for each file that needs fixing]

{EXPLANATION_LABEL}
[Explanation of the issue and fixes]

{ROOT_CAUSE_LABEL}
[Root cause of the failure]
"""
