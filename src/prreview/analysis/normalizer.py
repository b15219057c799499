"""Normalize partial extraction output into a complete AnalysisResult.

This is the only place defaults are applied, so every AnalysisResult leaving
the core has all five review fields with the right types.
"""

import logging
from collections.abc import Sequence

from prreview.analysis.extractor import extract
from prreview.models.review import SOURCE_MODEL, AnalysisResult, PartialAnalysis

logger = logging.getLogger(__name__)

SUMMARY_PLACEHOLDER = "Analysis completed, but summary could not be generated."
DEFAULT_RISKY_FILE_COUNT = 3


def _as_items(value: list[str] | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item for item in value if isinstance(item, str) and item)


def normalize(
    partial: PartialAnalysis,
    filenames: Sequence[str] = (),
    model: str | None = None,
) -> AnalysisResult:
    """Fill absent or empty fields with defaults.

    Args:
        partial: Extraction output
        filenames: Files that were submitted for analysis
        model: Model identifier that produced the text

    Returns:
        Complete AnalysisResult
    """
    summary = partial.summary if isinstance(partial.summary, str) else None
    if not summary or not summary.strip():
        summary = SUMMARY_PLACEHOLDER

    risky_files = _as_items(partial.risky_files)
    if not risky_files:
        risky_files = tuple(filenames[:DEFAULT_RISKY_FILE_COUNT])

    return AnalysisResult(
        summary=summary,
        risky_files=risky_files,
        complex_functions=_as_items(partial.complex_functions),
        refactoring_suggestions=_as_items(partial.refactoring_suggestions),
        security_issues=_as_items(partial.security_issues),
        source=SOURCE_MODEL,
        model=model,
    )


def parse_response(
    text: str,
    filenames: Sequence[str] = (),
    model: str | None = None,
) -> AnalysisResult:
    """Extract and normalize a raw model response.

    Cannot fail: if extraction itself blows up, every field is treated as
    absent.
    """
    try:
        partial = extract(text)
    except Exception as e:
        logger.warning("Could not parse model response, using defaults: %s", e)
        partial = PartialAnalysis()

    found = partial.found_fields()
    logger.debug("Recovered %d/5 fields from model response", len(found))

    return normalize(partial, list(filenames), model=model)
