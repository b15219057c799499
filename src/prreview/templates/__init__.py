"""Template rendering for review comments and terminal reports.

Jinja2 templates live alongside this module and are loaded with PackageLoader.
"""

from prreview.templates.renderer import ReportRenderer

__all__ = ["ReportRenderer"]
