"""
Deterministic stand-in for a live model, used in demo mode
"""

import re
import logging

from pr_teammate.shared.models import FileFix
from pr_teammate.shared.prompt_builder import CI_PROMPT_INTRO
from pr_teammate.shared.response_parser import render_ci_fix_response, render_code_fix_response


FILE_CONTENT_RE = re.compile(r"\*\*Current File Content:\*\*\s*```[^\n]*\n([\s\S]*?)```")
FILE_PATH_RE = re.compile(r"\*\*File Path:\*\*\s*(.+)")
FUNCTION_PARAMS_RE = re.compile(r"function\s+\w+\s*\(([^)]+)\)")

EXAMPLE_HANDLER = """/**
 * Example API endpoint with comprehensive error handling
 */
export async function handleRequest(req, res) {
  try {
    // Input validation
    const { id } = req.params;

    if (!id || typeof id !== 'string') {
      return res.status(400).json({
        status: 400,
        error: 'Invalid ID provided'
      });
    }

    // Process request
    const result = await processData(id);

    if (!result) {
      return res.status(404).json({
        status: 404,
        error: 'Resource not found'
      });
    }

    return res.status(200).json({
      status: 200,
      data: result
    });
  } catch (error) {
    console.error('Error handling request:', error);
    return res.status(500).json({
      status: 500,
      error: 'Internal server error'
    });
  }
}

async function processData(id) {
  // Your business logic here
  return { id, processed: true };
}"""

CI_FIX_PATH = "src/api.js"

CI_FIX_CODE = """/**
 * API Handler with proper error handling
 */
export async function getUser(id) {
  try {
    // Input validation
    if (!id || typeof id !== 'string') {
      return {
        status: 400,
        error: 'Invalid user ID provided'
      };
    }

    const user = await database.find(id);

    if (!user) {
      return {
        status: 404,
        error: 'User not found'
      };
    }

    return {
      status: 200,
      data: user
    };
  } catch (error) {
    console.error('Error fetching user:', error);
    return {
      status: 500,
      error: 'Internal server error'
    };
  }
}"""

CI_EXPLANATION = """The CI failure was caused by missing error handling and improper return values. I've fixed the code by:

1. Adding comprehensive try-catch blocks
2. Implementing input validation
3. Adding proper HTTP status codes
4. Including error logging
5. Handling edge cases (null, undefined)
6. Ensuring consistent return format

The linting errors have been resolved and the code now follows best practices."""

CI_ROOT_CAUSE = (
    "Missing error handling and inconsistent return values caused the CI checks to fail. "
    "The code was not handling edge cases properly and lacked proper error boundaries."
)

GOOD_CODE_EXPLANATION = """Great work! This code already follows best practices with comprehensive error handling. I've reviewed it and found:

- **Error Handling**: Properly implemented try-catch blocks
- **Input Validation**: Good checks for null, undefined, and invalid inputs
- **HTTP Status Codes**: Correct status codes (200, 400, 404, 500)
- **Error Logging**: Errors are logged for debugging

The code is production-ready. No significant changes needed!"""

GOOD_CODE_CHANGES = [
    "No changes required - code already follows best practices",
    "All error handling is properly implemented",
    "Input validation is comprehensive",
]

IMPROVED_CODE_EXPLANATION = """I've improved this code by adding error handling and best practices:

1. **Error Handling**: Added try-catch blocks to gracefully handle runtime errors
2. **Input Validation**: Added checks for missing required parameters
3. **Error Logging**: Added console.error for debugging

The code now follows common best practices."""

IMPROVED_CODE_CHANGES = [
    "Added try-catch error handling",
    "Implemented input validation for function parameters",
    "Included error logging for debugging",
]


def has_error_handling(code: str) -> bool:
    return "try" in code and "catch" in code


def has_input_validation(code: str) -> bool:
    return "if (!" in code or "typeof" in code


def has_error_reporting(code: str) -> bool:
    return ".status(" in code or "status:" in code or "console.error" in code


def is_already_good(code: str) -> bool:
    return has_error_handling(code) and has_input_validation(code) and has_error_reporting(code)


def generate_fixed_code(original_code: str) -> str:
    """Add error handling and parameter validation to a snippet"""

    if not original_code:
        logging.info("🔧 No source provided - returning example handler")
        return EXAMPLE_HANDLER

    if is_already_good(original_code):
        logging.info("✅ Code already has good error handling - returning as-is")
        return original_code

    improved = original_code

    if "try" not in improved and "catch" not in improved:
        body = "\n".join("  " + line for line in improved.split("\n"))
        improved = f"try {{\n{body}\n}} catch (error) {{\n  console.error('Error:', error);\n  throw error;\n}}"

    match = FUNCTION_PARAMS_RE.search(improved)
    if match:
        params = [p.strip() for p in match.group(1).split(",") if p.strip()]
        checks = []
        for param in params:
            name = re.split(r"[=:]", param)[0].strip()
            checks.append(
                f"  // Validate {name}\n  if (!{name}) {{\n    throw new Error('{name} is required');\n  }}"
            )
        if checks:
            improved = re.sub(
                r"^(\s*)(try\s*\{)",
                lambda m: f"{m.group(1)}{m.group(2)}\n" + "\n\n".join(checks) + "\n",
                improved,
                count=1,
            )

    return improved


def mock_code_fix_response(prompt: str) -> str:
    content_match = FILE_CONTENT_RE.search(prompt)
    path_match = FILE_PATH_RE.search(prompt)

    original_code = content_match.group(1).strip() if content_match else ""
    file_path = path_match.group(1).strip() if path_match else "file.js"

    logging.info(f"🎭 Generating mock fix for {file_path}")

    fixed_code = generate_fixed_code(original_code)

    if original_code and is_already_good(original_code):
        return render_code_fix_response(fixed_code, GOOD_CODE_EXPLANATION, GOOD_CODE_CHANGES)

    return render_code_fix_response(fixed_code, IMPROVED_CODE_EXPLANATION, IMPROVED_CODE_CHANGES)


def mock_ci_fix_response() -> str:
    return render_ci_fix_response(
        [FileFix(path=CI_FIX_PATH, content=CI_FIX_CODE)],
        CI_EXPLANATION,
        CI_ROOT_CAUSE,
    )


class MockResponder:
    """Returns canned, contract-shaped responses chosen from the prompt"""

    async def complete(self, prompt: str, system_message: str = None) -> str:
        logging.info("🎭 Using mock AI response (DEMO MODE)")

        if prompt.startswith(CI_PROMPT_INTRO):
            return mock_ci_fix_response()

        return mock_code_fix_response(prompt)
