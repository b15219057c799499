"""Deterministic-looking mock data.

Used whenever live analysis is unavailable, and for dashboard charts. Base
values derive from a seed (the sum of the repository identifier's code
points); only the per-step jitter is random.

None of these numbers measure anything. They exist so demos look stable.
"""

import logging
import math
import random
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from prreview.models.review import (
    SOURCE_MOCK,
    AnalysisResult,
    IssueCount,
    MetricPoint,
    ReviewScores,
)

logger = logging.getLogger(__name__)

MOCK_SUMMARY = (
    "This pull request introduces several new features with generally good code "
    "quality, but there are some areas that could be improved."
)

DEFAULT_RISKY_FILES = ("src/components/UserProfile.tsx", "lib/api/auth.ts")

MOCK_COMPLEX_FUNCTIONS = (
    "processUserData() in UserProfile.tsx - Cyclomatic complexity of 15",
    "validateAuthToken() in auth.ts - Contains nested conditionals that could be simplified",
)

MOCK_REFACTORING_SUGGESTIONS = (
    "Consider breaking down the UserProfile component into smaller, more focused components",
    "The error handling in API calls could be centralized to reduce duplication",
    "Use TypeScript generics for the data fetching functions to improve type safety",
)

MOCK_SECURITY_ISSUES = (
    "Potential XSS vulnerability in user input rendering",
    "API keys should not be stored in client-side code",
)

# metric kind -> (base, seed modulus, sine frequency, sine amplitude, jitter half-width)
SERIES_PARAMETERS: dict[str, tuple[int, int, float, float, float]] = {
    "quality": (70, 15, 0.3, 5.0, 3.0),
    "complexity": (40, 10, 0.2, 4.0, 2.5),
}

# category -> (exclusive random bound, seed modulus)
ISSUE_CATEGORIES: tuple[tuple[str, int, int], ...] = (
    ("Security", 10, 5),
    ("Performance", 15, 7),
    ("Complexity", 20, 10),
    ("Code Style", 25, 12),
    ("Documentation", 18, 8),
)


def repository_seed(repository_id: str) -> int:
    """Sum of the character codes of a repository identifier."""
    return sum(ord(char) for char in repository_id)


def series_base(repository_id: str, metric_kind: str) -> int:
    """Seed-derived starting value of a metric series.

    Raises:
        ValueError: If the metric kind is unknown
    """
    if metric_kind not in SERIES_PARAMETERS:
        raise ValueError(
            f"Invalid metric type: {metric_kind}. Valid: {sorted(SERIES_PARAMETERS)}"
        )
    base, modulus, *_ = SERIES_PARAMETERS[metric_kind]
    return base + repository_seed(repository_id) % modulus


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def mock_scores(pr_number: int) -> ReviewScores:
    """Scores that vary with the pull request number."""
    return ReviewScores(
        complexity=35 + pr_number % 50,
        test_coverage=70 - pr_number % 30,
        code_style=85,
    )


def mock_analysis(
    pr_number: int,
    filenames: Sequence[str] | None = None,
    repository_id: str = "",
) -> AnalysisResult:
    """Synthesize a review result.

    Args:
        pr_number: Pull request number
        filenames: Files already fetched, if any
        repository_id: "owner/repo", for logging only

    Returns:
        AnalysisResult with source "mock"
    """
    logger.info("Using mock analysis data for %s#%d", repository_id or "repository", pr_number)

    risky_files = tuple(filenames[:2]) if filenames else DEFAULT_RISKY_FILES
    security_issues = MOCK_SECURITY_ISSUES if pr_number % 3 == 0 else ()

    return AnalysisResult(
        summary=MOCK_SUMMARY,
        risky_files=risky_files,
        complex_functions=MOCK_COMPLEX_FUNCTIONS,
        refactoring_suggestions=MOCK_REFACTORING_SUGGESTIONS,
        security_issues=security_issues,
        scores=mock_scores(pr_number),
        source=SOURCE_MOCK,
    )


def generate_mock_series(
    repository_id: str,
    days: int,
    metric_kind: str,
    rng: random.Random | None = None,
    today: datetime | None = None,
) -> list[MetricPoint]:
    """Generate one point per day for a dashboard chart.

    Walks i from days down to 0, adding a sine term in i plus bounded jitter
    to a running value clamped to [0, 100].

    Args:
        repository_id: Repository identifier used for the seed
        days: Number of days of history (days + 1 points are returned)
        metric_kind: "quality" or "complexity"
        rng: Random source for the jitter (module random if None)
        today: Reference date (now, UTC, if None)

    Returns:
        Points ordered oldest first

    Raises:
        ValueError: If the metric kind is unknown or days is negative
    """
    if days < 0:
        raise ValueError(f"days must not be negative (got {days})")

    value = float(series_base(repository_id, metric_kind))
    _, _, frequency, amplitude, jitter = SERIES_PARAMETERS[metric_kind]
    rng = rng or random.Random()
    today = today or datetime.now(UTC)

    points: list[MetricPoint] = []
    for i in range(days, -1, -1):
        variation = math.sin(i * frequency) * amplitude + rng.uniform(-jitter, jitter)
        value = max(0.0, min(100.0, value + variation))
        date = today - timedelta(days=i)
        points.append(MetricPoint(date=date.isoformat(), value=_round_half_up(value)))

    return points


def generate_mock_issue_counts(
    repository_id: str,
    rng: random.Random | None = None,
) -> list[IssueCount]:
    """Generate issue counts for the five fixed categories."""
    seed = repository_seed(repository_id)
    rng = rng or random.Random()
    return [
        IssueCount(name=name, count=rng.randrange(bound) + seed % modulus)
        for name, bound, modulus in ISSUE_CATEGORIES
    ]


# metric type -> key holding the value in each dashboard point
SERIES_VALUE_KEYS = {"quality": "score", "complexity": "complexity"}
METRIC_TYPES = (*SERIES_VALUE_KEYS, "issues")


def metric_data(repository_id: str, metric_type: str, days: int = 30) -> list[dict]:
    """Chart payload for the dashboard in its wire shape.

    Raises:
        ValueError: If the metric type is unknown
    """
    if metric_type == "issues":
        return [count.to_dict() for count in generate_mock_issue_counts(repository_id)]
    if metric_type not in SERIES_VALUE_KEYS:
        raise ValueError(f"Invalid metric type: {metric_type}")

    key = SERIES_VALUE_KEYS[metric_type]
    return [
        {"date": point.date, key: point.value}
        for point in generate_mock_series(repository_id, days, metric_type)
    ]
