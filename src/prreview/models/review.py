"""Review result entities.

This module contains the entities exchanged between the review components:
- PullRequestFile: Changed file fetched from GitHub
- PullRequestSummary: Open pull request listing entry
- ReviewScores: Mock quality scores attached to demo results
- PartialAnalysis: Best-effort extraction output (fields may be absent)
- AnalysisResult: Canonical, always-complete review result
- ModelAttempt: Outcome of a single model invocation
- MetricPoint / IssueCount: Dashboard chart data
"""

from dataclasses import dataclass, field
from typing import Any

# AnalysisResult.source values
SOURCE_MODEL = "model"
SOURCE_MOCK = "mock"


@dataclass(frozen=True)
class PullRequestFile:
    """File changed in a pull request.

    Attributes:
        filename: Repository-relative path
        status: GitHub change status (added, modified, removed, renamed)
        content: Decoded file content, None when unavailable
    """

    filename: str
    status: str = "modified"
    content: str | None = None


@dataclass(frozen=True)
class PullRequestSummary:
    """Open pull request as returned by the listing endpoint."""

    number: int
    title: str = ""
    user: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "number": self.number,
            "title": self.title,
            "user": self.user,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True)
class ReviewScores:
    """Quality scores shown alongside a review.

    Attributes:
        complexity: Complexity score (higher is more complex)
        test_coverage: Estimated test coverage percentage
        code_style: Code style score
    """

    complexity: int
    test_coverage: int
    code_style: int

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary using dashboard key names."""
        return {
            "complexityScore": self.complexity,
            "testCoverage": self.test_coverage,
            "codeStyleScore": self.code_style,
        }


@dataclass
class PartialAnalysis:
    """Intermediate extraction result.

    None means the field was not found, which is distinct from a field that was
    found but empty. The normalizer treats both the same way.
    """

    summary: str | None = None
    risky_files: list[str] | None = None
    complex_functions: list[str] | None = None
    refactoring_suggestions: list[str] | None = None
    security_issues: list[str] | None = None

    def found_fields(self) -> list[str]:
        """Return attribute names of the fields that were found."""
        return [name for name, value in vars(self).items() if value is not None]


@dataclass(frozen=True)
class AnalysisResult:
    """Canonical review result handed to the CLI, API and comment renderer.

    All five review fields are always present. Consumers never null-check them.

    Attributes:
        summary: Human-readable assessment (never empty)
        risky_files: Files flagged as needing attention
        complex_functions: Function name plus reason descriptions
        refactoring_suggestions: Improvement suggestions
        security_issues: Security concerns
        scores: Quality scores (mock results only)
        source: "model" for live analysis, "mock" for demo data
        model: Model identifier that produced the analysis
    """

    summary: str
    risky_files: tuple[str, ...] = ()
    complex_functions: tuple[str, ...] = ()
    refactoring_suggestions: tuple[str, ...] = ()
    security_issues: tuple[str, ...] = ()
    scores: ReviewScores | None = None
    source: str = SOURCE_MODEL
    model: str | None = None

    @property
    def is_mock(self) -> bool:
        """Return True if this result was synthesized instead of analyzed."""
        return self.source == SOURCE_MOCK

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary using the camelCase wire names."""
        data: dict[str, Any] = {
            "summary": self.summary,
            "riskyFiles": list(self.risky_files),
            "complexFunctions": list(self.complex_functions),
            "refactoringSuggestions": list(self.refactoring_suggestions),
            "securityIssues": list(self.security_issues),
            "source": self.source,
            "model": self.model,
        }
        if self.scores is not None:
            data["scores"] = self.scores.to_dict()
        return data


@dataclass(frozen=True)
class ModelAttempt:
    """Outcome of invoking one model identifier.

    Exactly one of text or error is set.
    """

    model: str
    text: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return True if the invocation succeeded."""
        return self.error is None


@dataclass(frozen=True)
class MetricPoint:
    """Single point of a dashboard time series."""

    date: str
    value: int


@dataclass(frozen=True)
class IssueCount:
    """Issue count for one category."""

    name: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"name": self.name, "count": self.count}


@dataclass
class FallbackResult:
    """Successful outcome of a fallback invocation sequence.

    Attributes:
        text: Raw text payload from the model that succeeded
        model: Identifier of the model that succeeded
        attempts: Every attempt made, in order, ending with the success
    """

    text: str
    model: str
    attempts: list[ModelAttempt] = field(default_factory=list)
