"""Best-effort extraction of review fields from raw model text.

Extraction runs in two stages:
1. Structured: decode the first JSON object in the text. Fields it provides
   are used as-is.
2. Patterns: every field the object did not provide goes through an ordered
   cascade of pure strategies, each `(text, label) -> list[str] | None`.
   The first non-empty result wins.

Fields are extracted independently. A field no strategy recovers is reported
as None ("not found").
"""

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from prreview.models.review import PartialAnalysis

logger = logging.getLogger(__name__)

ExtractionStrategy = Callable[[str, str], list[str] | None]


class ParseFailure(Exception):
    """Raised when raw text cannot be parsed structurally.

    Always recovered locally by falling through to the next strategy.
    """

    pass


@dataclass(frozen=True)
class FieldLabels:
    """Section labels used to locate one field in free text.

    Attributes:
        attribute: PartialAnalysis attribute name
        key: camelCase JSON key
        label: Primary section label
        alternatives: Synonyms tried in order after the primary label
    """

    attribute: str
    key: str
    label: str
    alternatives: tuple[str, ...] = ()


SUMMARY_LABELS = FieldLabels("summary", "summary", "summary", ("overall assessment",))

LIST_FIELD_LABELS: tuple[FieldLabels, ...] = (
    FieldLabels("risky_files", "riskyFiles", "risky files", ("need attention",)),
    FieldLabels("complex_functions", "complexFunctions", "complex functions"),
    FieldLabels("refactoring_suggestions", "refactoringSuggestions", "refactoring suggestions"),
    FieldLabels(
        "security_issues",
        "securityIssues",
        "security",
        ("security issues", "security concerns", "vulnerabilities"),
    ),
)

_MARKER_RE = re.compile(r"^\s*(?:[-*•]+|\d+[.)])\s*")

# A markdown bold heading line such as "**Complex Functions:**"
_BOLD_HEADING_RE = re.compile(r"^[ \t]*\*\*[^*\n]+\*\*[ \t]*:?[ \t]*$")

# A following line that opens another "Label:" section ends the summary
_SECTION_HEADER_RE = re.compile(r'^[ \t]*[#*"]*[ \t]*[A-Za-z][A-Za-z _-]{0,40}"?[*]*[ \t]*:')


def _label_pattern(label: str) -> str:
    """Build a case-insensitive regex for a label.

    Words may be separated by whitespace, "_", "-" or nothing, so
    "risky files" matches "Risky Files", "risky_files" and "riskyFiles".
    """
    words = [re.escape(word) for word in label.split()]
    return r"(?<![A-Za-z])(?i:" + r"[\s_-]*".join(words) + r")"


def _normalize_key(key: str) -> str:
    return re.sub(r"[\s_-]", "", key).lower()


def clean_items(lines: list[str]) -> list[str]:
    """Strip bullet/number markers and drop empty lines."""
    items = []
    for line in lines:
        item = _MARKER_RE.sub("", line, count=1).strip()
        if item:
            items.append(item)
    return items


# =============================================================================
# Structured extraction
# =============================================================================


def find_json_object(text: str) -> dict[str, Any]:
    """Decode the first JSON object embedded in text.

    Tries the widest span (first "{" to last "}") first, then the first
    balanced object starting at the first "{".

    Raises:
        ParseFailure: If no JSON object can be decoded
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ParseFailure("No JSON object found")

    try:
        data = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        try:
            data, _ = json.JSONDecoder().raw_decode(text, start)
        except json.JSONDecodeError as e:
            raise ParseFailure(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseFailure(f"Expected a JSON object, got {type(data).__name__}")
    return data


def _coerce_item(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        return " - ".join(str(v) for v in item.values() if v not in (None, ""))
    return str(item)


def _coerce_list(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        items = [_coerce_item(item) for item in value if item is not None]
        return [item for item in items if item.strip()]
    return [_coerce_item(value)]


def extract_structured(text: str) -> tuple[PartialAnalysis, set[str]]:
    """Extract fields from an embedded JSON object.

    Returns:
        Tuple of (partial record, attribute names the object provided)

    Raises:
        ParseFailure: If no JSON object can be decoded
    """
    data = find_json_object(text)
    by_key = {_normalize_key(str(k)): v for k, v in data.items()}

    partial = PartialAnalysis()
    provided: set[str] = set()

    summary_key = _normalize_key(SUMMARY_LABELS.key)
    if summary_key in by_key:
        provided.add("summary")
        value = by_key[summary_key]
        if value is not None:
            partial.summary = value if isinstance(value, str) else _coerce_item(value)

    for labels in LIST_FIELD_LABELS:
        key = _normalize_key(labels.key)
        if key in by_key:
            provided.add(labels.attribute)
            setattr(partial, labels.attribute, _coerce_list(by_key[key]))

    return partial, provided


# =============================================================================
# Pattern strategies
# =============================================================================


def extract_bullet_block(text: str, label: str) -> list[str] | None:
    """Bullet lines (-, *, •) directly after a label line."""
    pattern = re.compile(
        _label_pattern(label) + r'"?[*#: \t]*\n((?:[ \t]*[-*•][^\n]*(?:\n|\Z))+)'
    )
    match = pattern.search(text)
    if not match:
        return None

    lines = []
    for line in match.group(1).split("\n"):
        if _BOLD_HEADING_RE.match(line):
            break
        lines.append(line)
    return clean_items(lines) or None


def extract_numbered_block(text: str, label: str) -> list[str] | None:
    """Numbered lines (1., 2) ...) directly after a label line."""
    pattern = re.compile(
        _label_pattern(label) + r'"?[*#: \t]*\n((?:[ \t]*\d+[.)][^\n]*(?:\n|\Z))+)'
    )
    match = pattern.search(text)
    if not match:
        return None
    return clean_items(match.group(1).split("\n"))


def extract_json_array(text: str, label: str) -> list[str] | None:
    """A `"label": [ ... ]` fragment, parsed as JSON or split on commas."""
    pattern = re.compile('"' + _label_pattern(label) + r'"\s*:\s*\[(.*?)\]', re.DOTALL)
    match = pattern.search(text)
    if not match:
        return None

    body = match.group(1)
    try:
        items = json.loads(f"[{body}]")
    except json.JSONDecodeError:
        parts = [part.strip().strip("\"'").strip() for part in body.split(",")]
        return [part for part in parts if part]

    return [s for s in (_coerce_item(item).strip() for item in items) if s]


def extract_generic_section(text: str, label: str) -> list[str] | None:
    """`label: text` up to the next blank line or capitalized line."""
    pattern = re.compile(
        _label_pattern(label) + r'"?[*#]*[ \t]*:[*]*\s*(.*?)(?=\n[ \t]*\n|\n[A-Z]|\Z)',
        re.DOTALL,
    )
    match = pattern.search(text)
    if not match:
        return None
    return clean_items(match.group(1).split("\n"))


LIST_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    extract_bullet_block,
    extract_numbered_block,
    extract_json_array,
)


def extract_list(text: str, label: str, *alternatives: str) -> list[str] | None:
    """Run the list cascade for one field.

    Order: list strategies under the label, then under each alternative,
    then the generic section capture under the label.
    """
    for current in (label, *alternatives):
        for strategy in LIST_STRATEGIES:
            items = strategy(text, current)
            if items:
                return items

    return extract_generic_section(text, label) or None


def extract_summary(text: str, label: str, *alternatives: str) -> str | None:
    """Capture the text introduced by a summary label.

    Capture runs to the next blank line, stopping early at a line that opens
    another labeled section.
    """
    for current in (label, *alternatives):
        pattern = re.compile(
            _label_pattern(current)
            + r'"?[*#]*(?:[ \t]*:[*]*[ \t]*|[ \t]*\n[ \t]*)(.+?)(?=\n[ \t]*\n|\Z)',
            re.DOTALL,
        )
        match = pattern.search(text)
        if not match:
            continue

        lines = match.group(1).strip().split("\n")
        kept = [lines[0]]
        for line in lines[1:]:
            if _SECTION_HEADER_RE.match(line):
                break
            kept.append(line)

        summary = " ".join(line.strip() for line in kept).strip().rstrip(",").strip().strip('"')
        if summary:
            return summary

    return None


# =============================================================================
# Entry point
# =============================================================================


def extract(text: str) -> PartialAnalysis:
    """Extract a partial review record from raw model text.

    Never raises: a failing strategy is logged and the field is reported
    absent.

    Args:
        text: Raw model output

    Returns:
        PartialAnalysis with None for fields that were not found
    """
    if not isinstance(text, str) or not text.strip():
        return PartialAnalysis()

    try:
        partial, provided = extract_structured(text)
        logger.debug("Structured extraction provided: %s", ", ".join(sorted(provided)))
    except ParseFailure as e:
        logger.debug("Structured extraction failed, using patterns: %s", e)
        partial, provided = PartialAnalysis(), set()

    if "summary" not in provided:
        try:
            partial.summary = extract_summary(text, SUMMARY_LABELS.label, *SUMMARY_LABELS.alternatives)
        except Exception as e:
            logger.warning("Summary extraction failed: %s", e)

    for labels in LIST_FIELD_LABELS:
        if labels.attribute in provided:
            continue
        try:
            value = extract_list(text, labels.label, *labels.alternatives)
        except Exception as e:
            logger.warning("Extraction of %s failed: %s", labels.key, e)
            value = None
        setattr(partial, labels.attribute, value)

    return partial
