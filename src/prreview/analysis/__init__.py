"""Analysis core: extraction, normalization, mock data and orchestration."""

from prreview.analysis.extractor import ParseFailure, extract
from prreview.analysis.mock import (
    METRIC_TYPES,
    generate_mock_issue_counts,
    generate_mock_series,
    metric_data,
    mock_analysis,
    repository_seed,
)
from prreview.analysis.normalizer import SUMMARY_PLACEHOLDER, normalize, parse_response
from prreview.analysis.orchestrator import ReviewOrchestrator

__all__ = [
    "METRIC_TYPES",
    "ParseFailure",
    "ReviewOrchestrator",
    "SUMMARY_PLACEHOLDER",
    "extract",
    "generate_mock_issue_counts",
    "generate_mock_series",
    "metric_data",
    "mock_analysis",
    "normalize",
    "parse_response",
    "repository_seed",
]
