"""Turn free-text provider output into structured exercises."""
from __future__ import annotations

import logging
import re

from swim_planner.models.schemas import Exercise


logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = re.compile(r"\n\s*\n")
# Markdown bullets or numbering some models put in front of fields.
LIST_MARKER = re.compile(r"^\s*(?:[-*•]\s+|\d+[.)]\s*)?")
BOLD_MARKER = re.compile(r"^\s*(?:\*\*|__)")
LEADING_INT = re.compile(r"\d+")

FIELD_PREFIXES = {
    "exercise name": "name",
    "sets": "sets",
    "reps": "reps",
    "notes": "notes",
}

FALLBACK_NOTES_CHARS = 200


def fallback_exercises(text: str) -> list[Exercise]:
    """Generic three-step workout used when the reply has no recognisable exercises."""

    return [
        Exercise(name="Warm-up", sets=1, reps=1, notes="Easy swimming to warm up"),
        Exercise(name="Main Set", sets=3, reps=1, notes=text[:FALLBACK_NOTES_CHARS]),
        Exercise(name="Cool-down", sets=1, reps=1, notes="Easy swimming to cool down"),
    ]


def _positive_int(value: str | None) -> int:
    if not value:
        return 1
    match = LEADING_INT.match(value.strip())
    if not match:
        return 1
    number = int(match.group())
    return number if number >= 1 else 1


def _parse_line(raw_line: str) -> tuple[str | None, str]:
    """Split a line into its recognised field and the text after the first colon.

    A bolded label (``**Notes:** ...``) leaves its closing marker right after
    the colon; only that marker is dropped, the rest of the value is kept as is.
    """
    line = LIST_MARKER.sub("", raw_line, count=1)
    bold = BOLD_MARKER.match(line)
    if bold:
        line = line[bold.end():]
    label, sep, value = line.partition(":")
    if not sep:
        return None, ""
    field = FIELD_PREFIXES.get(label.strip().strip("*_").strip().lower())
    if bold:
        value = BOLD_MARKER.sub("", value, count=1)
    return field, value.strip()


def _parse_block(block: str) -> Exercise | None:
    fields: dict[str, str] = {}
    for raw_line in block.splitlines():
        field, value = _parse_line(raw_line)
        if field and field not in fields:
            fields[field] = value

    name = fields.get("name")
    if not name:
        return None
    return Exercise(
        name=name,
        sets=_positive_int(fields.get("sets")),
        reps=_positive_int(fields.get("reps")),
        notes=fields.get("notes", ""),
    )


def parse_exercises(text: str) -> list[Exercise]:
    """
    Parse the provider's reply into an ordered list of exercises.

    Blocks are separated by blank lines; each block contributes one exercise when
    it carries an ``Exercise Name:`` line. Values keep everything after the first
    colon. Sets and reps default to 1.

    Returns:
        list[Exercise]: Parsed exercises, or the fixed fallback workout when none
        could be recognised. Never empty.
    """

    normalized = (text or "").replace("\r\n", "\n")
    exercises = []
    for block in BLOCK_SEPARATOR.split(normalized):
        exercise = _parse_block(block)
        if exercise is not None:
            exercises.append(exercise)

    if not exercises:
        logger.warning("No exercises recognised in %d chars of AI output, using fallback workout", len(normalized))
        return fallback_exercises(text or "")

    logger.debug("Parsed %d exercises from AI output", len(exercises))
    return exercises
