"""Unit tests for response normalization."""

import pytest

from prreview.analysis.normalizer import SUMMARY_PLACEHOLDER, normalize, parse_response
from prreview.models.review import SOURCE_MODEL, PartialAnalysis


class TestNormalize:
    """Tests for default filling."""

    def test_empty_partial_gets_defaults(self) -> None:
        result = normalize(PartialAnalysis(), ["a.py", "b.py", "c.py", "d.py"])

        assert result.summary == SUMMARY_PLACEHOLDER
        assert result.risky_files == ("a.py", "b.py", "c.py")
        assert result.complex_functions == ()
        assert result.refactoring_suggestions == ()
        assert result.security_issues == ()
        assert result.source == SOURCE_MODEL
        assert result.scores is None

    def test_blank_summary_replaced(self) -> None:
        result = normalize(PartialAnalysis(summary="   "))

        assert result.summary == SUMMARY_PLACEHOLDER

    def test_empty_risky_files_use_filenames(self) -> None:
        result = normalize(PartialAnalysis(risky_files=[]), ["x.py"])

        assert result.risky_files == ("x.py",)

    def test_no_filenames_leaves_risky_files_empty(self) -> None:
        assert normalize(PartialAnalysis()).risky_files == ()

    def test_found_values_kept(self) -> None:
        partial = PartialAnalysis(
            summary="Fine.",
            risky_files=["r.py"],
            complex_functions=["f()"],
            refactoring_suggestions=["inline g"],
            security_issues=["eval on input"],
        )

        result = normalize(partial, ["other.py"], model="model-b")

        assert result.summary == "Fine."
        assert result.risky_files == ("r.py",)
        assert result.complex_functions == ("f()",)
        assert result.refactoring_suggestions == ("inline g",)
        assert result.security_issues == ("eval on input",)
        assert result.model == "model-b"


class TestParseResponse:
    """Tests for extract + normalize."""

    def test_complete_json(self, load_response) -> None:
        result = parse_response(load_response("json_complete"), ["ignored.py"])

        assert result.to_dict() == {
            "summary": "Solid change overall; the auth refactor needs a closer look.",
            "riskyFiles": ["lib/api/auth.ts", "src/server.py"],
            "complexFunctions": ["validateToken() in auth.ts - nested conditionals"],
            "refactoringSuggestions": [
                "Extract token parsing into its own helper",
                "Centralize error handling",
            ],
            "securityIssues": ["Token is logged at debug level"],
            "source": "model",
            "model": None,
        }

    def test_unstructured_text_is_complete(self, load_response) -> None:
        result = parse_response(load_response("unstructured"), ["a.py", "b.py"], model="m")

        assert result.summary == SUMMARY_PLACEHOLDER
        assert result.risky_files == ("a.py", "b.py")
        assert result.complex_functions == ()
        assert result.model == "m"

    def test_extraction_crash_degrades_to_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import prreview.analysis.normalizer as normalizer

        def boom(text):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(normalizer, "extract", boom)

        result = parse_response("anything", ["a.py"])

        assert result.summary == SUMMARY_PLACEHOLDER
        assert result.risky_files == ("a.py",)
