"""Prompt construction for pull request analysis.

The prompt embeds a bounded number of changed files, each under a
"--- filename ---" header, and asks for a JSON object using the result field
names. Models do not always comply, which is why the extractor exists.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from prreview.models.review import PullRequestFile

TRUNCATION_MARKER = "\n... (content truncated) ..."
CONTENT_UNAVAILABLE = "(Content not available)"

ANALYSIS_SYSTEM_PROMPT = (
    "You are a senior software engineer reviewing a GitHub pull request. "
    "Be specific: name files and functions, and keep each finding to one sentence."
)

ANALYSIS_INSTRUCTIONS = """Analyze the following code from a GitHub Pull Request for:
1. Code quality issues
2. Complex functions that could be simplified
3. Potential security vulnerabilities
4. Refactoring suggestions
5. Overall code health assessment

Code:
{code}

Provide your analysis in the following JSON format:
{{
  "summary": "Overall assessment of the code",
  "riskyFiles": ["list of files that need attention"],
  "complexFunctions": ["list of complex functions with descriptions"],
  "refactoringSuggestions": ["list of specific refactoring suggestions"],
  "securityIssues": ["list of potential security concerns"]
}}
"""


@dataclass(frozen=True)
class PromptContext:
    """Pull request content prepared for the prompt.

    Attributes:
        owner: Repository owner
        repo: Repository name
        pr_number: Pull request number
        files: Files selected for analysis (already limited)
    """

    owner: str
    repo: str
    pr_number: int
    files: tuple[PullRequestFile, ...]

    @property
    def filenames(self) -> list[str]:
        """Names of the files submitted for analysis."""
        return [f.filename for f in self.files]


def truncate_content(content: str, max_chars: int) -> str:
    """Cut content to max_chars and append the truncation marker."""
    if len(content) <= max_chars:
        return content
    return content[:max_chars] + TRUNCATION_MARKER


def select_files(
    files: Sequence[PullRequestFile],
    max_files: int = 5,
    max_file_chars: int = 10_000,
) -> tuple[PullRequestFile, ...]:
    """Limit the file list and truncate oversized content.

    Args:
        files: Changed files in listing order
        max_files: Maximum number of files to keep
        max_file_chars: Per-file content limit

    Returns:
        Selected files with content truncated where needed
    """
    selected = []
    for file in list(files)[:max_files]:
        if file.content is not None and len(file.content) > max_file_chars:
            file = PullRequestFile(
                filename=file.filename,
                status=file.status,
                content=truncate_content(file.content, max_file_chars),
            )
        selected.append(file)
    return tuple(selected)


def format_code_content(context: PromptContext) -> str:
    """Render the per-file code block embedded in the prompt."""
    parts = [f"Pull Request #{context.pr_number} from {context.owner}/{context.repo}\n"]
    for file in context.files:
        body = file.content if file.content is not None else CONTENT_UNAVAILABLE
        parts.append(f"\n--- {file.filename} ---\n{body}\n")
    return "".join(parts)


def build_analysis_prompt(context: PromptContext) -> str:
    """Build the full analysis prompt for a pull request."""
    return ANALYSIS_INSTRUCTIONS.format(code=format_code_content(context))
