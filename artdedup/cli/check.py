"""Check command for scoring a submission against nearby artworks.

Input file format:
    {
      "query": {"coordinates": {"lat": 49.28, "lon": -123.12},
                "title": "Digital Orca", "tags": ["sculpture"]},
      "candidates": [
        {"id": "a1", "lat": 49.28, "lon": -123.12,
         "title": "Digital Orca", "tags": "[\\"sculpture\\"]"}
      ]
    }

Candidates may use either "coordinates" or flat "lat"/"lon" fields, and
their tags either as the stored JSON string or as a decoded list/object.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from pydantic import ValidationError

from artdedup.cli.utils import (
    display_error,
    display_info,
    display_success,
    display_warning,
    handle_errors,
    load_config,
)
from artdedup.models.similarity import CandidateArtwork, SimilarityQuery
from artdedup.services.similarity_results import get_similarity_explanation
from artdedup.services.similarity_service import SimilarityService, artwork_to_candidate
from artdedup.services.similarity_strategy import DefaultSimilarityStrategy
from artdedup.utils.exceptions import SimilarityInputError
from artdedup.utils.geo import is_valid_coordinates

# Exit code signalling that at least one high-similarity match exists
EXIT_HIGH_SIMILARITY = 2


def load_check_input(input_file: Path) -> tuple[SimilarityQuery, List[CandidateArtwork]]:
    """Parse and validate a check input file.

    Raises:
        SimilarityInputError: If the file is malformed or has invalid coordinates.
    """
    try:
        data = json.loads(input_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SimilarityInputError("input_file", str(input_file), str(e))

    if not isinstance(data, dict) or "query" not in data:
        raise SimilarityInputError("input_file", str(input_file), "missing 'query'")

    try:
        query = SimilarityQuery.model_validate(data["query"])
        candidates = [_to_candidate(record) for record in data.get("candidates", [])]
    except (ValidationError, KeyError, TypeError) as e:
        raise SimilarityInputError("input_file", str(input_file), str(e))

    if not is_valid_coordinates(query.coordinates):
        raise SimilarityInputError(
            "query.coordinates", query.coordinates.model_dump(), "out of range"
        )
    for candidate in candidates:
        if not is_valid_coordinates(candidate.coordinates):
            raise SimilarityInputError(
                f"candidates[{candidate.id}].coordinates",
                candidate.coordinates.model_dump(),
                "out of range",
            )

    return query, candidates


def _to_candidate(record: Dict[str, Any]) -> CandidateArtwork:
    tags = record.get("tags")
    if tags is not None and not isinstance(tags, str):
        # Re-encode decoded tags into the storage representation
        record = {**record, "tags": json.dumps(tags)}

    if "coordinates" in record:
        return CandidateArtwork.model_validate(record)
    return artwork_to_candidate(record)


@handle_errors
def check_command(
    input_file: Path = typer.Argument(..., help="JSON file with query and candidates"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Similarity config YAML"
    ),
    threshold: str = typer.Option(
        "warn", "--threshold", "-t", help="Lowest band to list: warn or high"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
    """Score a submission against candidate artworks.

    Exits with code 2 when a high-similarity match is found.
    """
    if threshold not in ("warn", "high"):
        display_error(f"Invalid threshold '{threshold}'. Use 'warn' or 'high'.")
        raise typer.Exit(code=1)

    config = load_config(config_path)

    try:
        query, candidates = load_check_input(input_file)
    except SimilarityInputError as e:
        display_error(f"Input Error: {e}")
        raise typer.Exit(code=1)

    service = SimilarityService(strategy=DefaultSimilarityStrategy(config))
    result = service.check_for_duplicates(query, candidates)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        matches = (
            result.high_similarity_matches
            if threshold == "high"
            else result.warning_similarity_matches
        )
        display_info(f"Scored {len(candidates)} candidate(s)")
        if not matches:
            display_success("No likely duplicates found.")
        for match in matches:
            line = f"[{match.threshold.value}] {match.artwork_id}: {get_similarity_explanation(match)}"
            if match.threshold.value == "high":
                display_error(line)
            else:
                display_warning(line)

    if result.has_high_similarity:
        raise typer.Exit(code=EXIT_HIGH_SIMILARITY)
