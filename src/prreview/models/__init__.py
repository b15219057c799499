"""PR Review Helper data models.

This module exports the core entities used throughout the application:
- AnalysisResult: Canonical review result
- PartialAnalysis: Best-effort extraction output
- PullRequestFile / PullRequestSummary: GitHub entities
- ModelAttempt / FallbackResult: Model invocation outcomes
- LLMConfig: Model provider configuration
"""

from prreview.models.llm_config import VALID_PROVIDERS, LLMConfig
from prreview.models.review import (
    SOURCE_MOCK,
    SOURCE_MODEL,
    AnalysisResult,
    FallbackResult,
    IssueCount,
    MetricPoint,
    ModelAttempt,
    PartialAnalysis,
    PullRequestFile,
    PullRequestSummary,
    ReviewScores,
)

__all__ = [
    "AnalysisResult",
    "FallbackResult",
    "IssueCount",
    "LLMConfig",
    "MetricPoint",
    "ModelAttempt",
    "PartialAnalysis",
    "PullRequestFile",
    "PullRequestSummary",
    "ReviewScores",
    "SOURCE_MOCK",
    "SOURCE_MODEL",
    "VALID_PROVIDERS",
]
