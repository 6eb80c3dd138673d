"""Rule table loading.

Builds the ordered ``RuleTable`` consumed by ``services.version_router`` from
one of two sources:

- a directory of mirror buckets, each holding a ``cap.txt`` marker that names
  the highest release line the bucket serves
- a static rules file, one ``threshold [bucket]`` entry per line

The table is loaded once at startup and never re-read per request.
"""

import logging
from pathlib import Path

from core.config import Settings
from services.version_router import RuleTable, ThresholdRule

logger = logging.getLogger(__name__)

MARKER_FILENAME = "cap.txt"


class RulesConfigError(Exception):
    """Raised when the rule table cannot be loaded."""


def load_marker_rules(root: Path) -> RuleTable:
    """Load one rule per ``<bucket>/cap.txt`` under ``root``.

    Markers are visited in sorted path order, which is the order rules are
    matched in. Empty markers and markers in hidden directories are
    skipped.
    """
    if not root.is_dir():
        raise RulesConfigError(f"Rules directory not found: {root}")

    rules: list[ThresholdRule] = []
    for marker in sorted(root.glob(f"*/{MARKER_FILENAME}")):
        # Hidden directories are not buckets
        if marker.parent.name.startswith("."):
            continue
        threshold = marker.read_text(encoding="utf-8").rstrip()
        if not threshold:
            logger.warning("rules.marker_empty", extra={"marker": str(marker)})
            continue
        rules.append(ThresholdRule(threshold=threshold, bucket=marker.parent.name))
    return tuple(rules)


def _parse_rule_line(line: str, path: Path, lineno: int) -> ThresholdRule | None:
    """Parse one rules-file line; blank and comment-only lines give None."""
    content = line.split("#", 1)[0].strip()
    if not content:
        return None

    fields = content.split()
    if len(fields) == 1:
        # versions.txt form: the threshold names its own bucket
        return ThresholdRule(threshold=fields[0], bucket=fields[0])
    if len(fields) == 2:
        return ThresholdRule(threshold=fields[0], bucket=fields[1])
    raise RulesConfigError(
        f"{path}:{lineno}: expected 'threshold [bucket]', got {content!r}"
    )


def load_file_rules(path: Path) -> RuleTable:
    """Load rules from a static rules file, preserving line order."""
    if not path.is_file():
        raise RulesConfigError(f"Rules file not found: {path}")

    with open(path, encoding="utf-8") as f:
        rules = [
            rule
            for lineno, line in enumerate(f, start=1)
            if (rule := _parse_rule_line(line, path, lineno)) is not None
        ]
    return tuple(rules)


def load_rules(settings: Settings) -> RuleTable:
    """Load the rule table from the source named by ``settings.rules_source``.

    Raises:
        RulesConfigError: If the source is missing or malformed.
    """
    if settings.rules_source == "file":
        rules = load_file_rules(settings.rules_file_path)
        location = str(settings.rules_file_path)
    else:
        rules = load_marker_rules(settings.rules_dir_path)
        location = str(settings.rules_dir_path)

    logger.info(
        "rules.loaded",
        extra={
            "source": settings.rules_source,
            "location": location,
            "count": len(rules),
        },
    )
    return rules
