"""Tag parsing and overlap utilities.

Candidate tags arrive from storage as a JSON string in one of three shapes,
depending on which import plugin or schema version produced the record:
- Flat array of strings: ["sculpture", "bronze"]
- Flat object of key -> string: {"material": "bronze", "type": "sculpture"}
- Structured tags: {"tags": {"material": "bronze"}, "version": "1.0.0"}

Anything else, including malformed JSON, parses to an empty list.
"""

import json
from typing import Any, Iterable, List, Optional, Set, Tuple
import structlog

logger = structlog.get_logger()


def parse_candidate_tags(tags_json: Optional[str]) -> List[str]:
    """Parse a stored tag payload into a list of tag values.

    Args:
        tags_json: Raw JSON string from storage, or None.

    Returns:
        Tag values in document order. Empty on missing or malformed input.

    Examples:
        >>> parse_candidate_tags('["sculpture", "bronze"]')
        ['sculpture', 'bronze']
        >>> parse_candidate_tags('{"tags": {"material": "bronze"}}')
        ['bronze']
        >>> parse_candidate_tags("{not valid json")
        []
    """
    if not tags_json:
        return []

    # Deep nesting and oversized integers fail outside JSONDecodeError
    try:
        parsed = json.loads(tags_json)
    except (ValueError, TypeError, RecursionError) as e:
        logger.debug("candidate_tags_unparseable", error=str(e))
        return []

    return extract_tag_values(parsed)


def extract_tag_values(parsed: Any) -> List[str]:
    """Pull string tag values out of an already decoded tag payload."""
    if isinstance(parsed, list):
        return _string_values(parsed)

    if isinstance(parsed, dict):
        nested = parsed.get("tags")
        if isinstance(nested, dict):
            # Structured schema: top-level keys are envelope metadata
            return _string_values(nested.values())
        return _string_values(parsed.values())

    return []


def _string_values(values: Iterable[Any]) -> List[str]:
    return [value for value in values if isinstance(value, str)]


def jaccard_similarity(
    tags1: Iterable[str], tags2: Iterable[str]
) -> Tuple[float, Set[str], Set[str]]:
    """Case-insensitive Jaccard similarity of two tag collections.

    Args:
        tags1: First tag collection.
        tags2: Second tag collection.

    Returns:
        Tuple of (score, intersection, union) over lowercased values.
        Score is 0.0 when both collections are empty.
    """
    set1 = {tag.lower() for tag in tags1}
    set2 = {tag.lower() for tag in tags2}

    intersection = set1 & set2
    union = set1 | set2

    if not union:
        return 0.0, intersection, union
    return len(intersection) / len(union), intersection, union
