"""Template renderer for review output.

Renders AnalysisResult to a GitHub comment (markdown) and a terminal report
using Jinja2 templates shipped with the package.
"""

import logging
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateError

from prreview.models.review import AnalysisResult

logger = logging.getLogger(__name__)

COMMENT_TEMPLATE = "comment.md.j2"
REPORT_TEMPLATE = "report.txt.j2"


class ReportRenderer:
    """Renders review results.

    Usage:
        renderer = ReportRenderer()
        body = renderer.render_comment(result)
    """

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("prreview", "templates"),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def _build_context(self, result: AnalysisResult, **extra: Any) -> dict[str, Any]:
        context: dict[str, Any] = {
            "summary": result.summary,
            "risky_files": list(result.risky_files),
            "complex_functions": list(result.complex_functions),
            "refactoring_suggestions": list(result.refactoring_suggestions),
            "security_issues": list(result.security_issues),
            "scores": result.scores,
            "is_mock": result.is_mock,
            "model": result.model,
        }
        context.update(extra)
        return context

    def render(self, template_name: str, result: AnalysisResult, **extra: Any) -> str:
        """Render a result with a named template.

        Raises:
            ValueError: If the template is missing or fails to render
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**self._build_context(result, **extra))
        except TemplateError as e:
            logger.error("Template rendering failed (%s): %s", template_name, e)
            raise ValueError(f"Template rendering failed: {e}") from e

    def render_comment(self, result: AnalysisResult) -> str:
        """Markdown body for a pull request comment."""
        return self.render(COMMENT_TEMPLATE, result)

    def render_report(
        self,
        result: AnalysisResult,
        pr_number: int | None = None,
        repository: str | None = None,
    ) -> str:
        """Plain-text terminal report."""
        return self.render(REPORT_TEMPLATE, result, pr_number=pr_number, repository=repository)
