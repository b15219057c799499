"""Unit tests for deterministic mock data."""

import random
from datetime import UTC, datetime, timedelta

import pytest

from prreview.analysis.mock import (
    DEFAULT_RISKY_FILES,
    MOCK_SECURITY_ISSUES,
    generate_mock_issue_counts,
    generate_mock_series,
    metric_data,
    mock_analysis,
    mock_scores,
    repository_seed,
    series_base,
)


class TestSeed:
    """Tests for seed-derived base values."""

    def test_seed_is_code_point_sum(self) -> None:
        assert repository_seed("ab") == 97 + 98
        assert repository_seed("") == 0

    def test_series_base_values(self) -> None:
        seed = repository_seed("acme/widgets")

        assert series_base("acme/widgets", "quality") == 70 + seed % 15
        assert series_base("acme/widgets", "complexity") == 40 + seed % 10

    def test_series_base_is_stable(self) -> None:
        assert series_base("org/repo", "quality") == series_base("org/repo", "quality")

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid metric type"):
            series_base("org/repo", "velocity")


class TestMockAnalysis:
    """Tests for synthesized review results."""

    def test_security_issues_follow_pr_number(self) -> None:
        for pr_number in range(0, 21):
            result = mock_analysis(pr_number)
            if pr_number % 3 == 0:
                assert result.security_issues == MOCK_SECURITY_ISSUES
            else:
                assert result.security_issues == ()

    def test_default_risky_files_without_filenames(self) -> None:
        assert mock_analysis(7, []).risky_files == DEFAULT_RISKY_FILES
        assert mock_analysis(7).risky_files == (
            "src/components/UserProfile.tsx",
            "lib/api/auth.ts",
        )

    def test_risky_files_from_first_two_filenames(self) -> None:
        result = mock_analysis(4, ["a.py", "b.py", "c.py"])

        assert result.risky_files == ("a.py", "b.py")

    def test_result_is_marked_mock(self) -> None:
        result = mock_analysis(1)

        assert result.is_mock
        assert result.to_dict()["source"] == "mock"
        assert result.summary
        assert len(result.complex_functions) == 2
        assert len(result.refactoring_suggestions) == 3

    def test_scores(self) -> None:
        scores = mock_scores(57)

        assert scores.complexity == 35 + 57 % 50
        assert scores.test_coverage == 70 - 57 % 30
        assert scores.code_style == 85
        assert mock_analysis(57).scores == scores


class TestMockSeries:
    """Tests for chart time series."""

    def test_point_count_and_order(self) -> None:
        today = datetime(2024, 3, 31, tzinfo=UTC)

        points = generate_mock_series("org/repo", 30, "quality", random.Random(1), today)

        assert len(points) == 31
        assert points[0].date == (today - timedelta(days=30)).isoformat()
        assert points[-1].date == today.isoformat()

    def test_values_are_bounded_integers(self) -> None:
        for kind in ("quality", "complexity"):
            points = generate_mock_series("org/repo", 90, kind, random.Random(7))
            assert all(isinstance(p.value, int) for p in points)
            assert all(0 <= p.value <= 100 for p in points)

    def test_same_rng_seed_reproduces_series(self) -> None:
        today = datetime(2024, 1, 1, tzinfo=UTC)

        first = generate_mock_series("org/repo", 10, "complexity", random.Random(3), today)
        second = generate_mock_series("org/repo", 10, "complexity", random.Random(3), today)

        assert first == second

    def test_zero_days_gives_single_point(self) -> None:
        assert len(generate_mock_series("org/repo", 0, "quality")) == 1

    def test_negative_days_rejected(self) -> None:
        with pytest.raises(ValueError):
            generate_mock_series("org/repo", -1, "quality")


class TestIssueCounts:
    """Tests for issue category counts."""

    def test_categories_and_ranges(self) -> None:
        seed = repository_seed("org/repo")
        counts = generate_mock_issue_counts("org/repo", random.Random(5))

        assert [c.name for c in counts] == [
            "Security",
            "Performance",
            "Complexity",
            "Code Style",
            "Documentation",
        ]
        bounds = {
            "Security": (10, 5),
            "Performance": (15, 7),
            "Complexity": (20, 10),
            "Code Style": (25, 12),
            "Documentation": (18, 8),
        }
        for count in counts:
            bound, modulus = bounds[count.name]
            base = seed % modulus
            assert base <= count.count < base + bound


class TestMetricData:
    """Tests for the dashboard payload shape."""

    def test_quality_points(self) -> None:
        data = metric_data("org/repo", "quality", 5)

        assert len(data) == 6
        assert set(data[0]) == {"date", "score"}

    def test_complexity_points(self) -> None:
        data = metric_data("org/repo", "complexity", 2)

        assert set(data[0]) == {"date", "complexity"}

    def test_issue_counts(self) -> None:
        data = metric_data("org/repo", "issues")

        assert len(data) == 5
        assert set(data[0]) == {"name", "count"}

    def test_invalid_type(self) -> None:
        with pytest.raises(ValueError, match="Invalid metric type"):
            metric_data("org/repo", "velocity")
