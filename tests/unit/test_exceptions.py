"""Tests for the similarity exception hierarchy"""

import pytest

from artdedup.utils.exceptions import (
    DuplicateDetectionError,
    SimilarityCalculationError,
    SimilarityConfigurationError,
    SimilarityError,
    SimilarityInputError,
    get_similarity_error_code,
    is_similarity_error,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            SimilarityConfigurationError("bad weights"),
            SimilarityInputError("lat", 123.0, "out of range"),
            SimilarityCalculationError("art-1", ValueError("x")),
            DuplicateDetectionError({"title": "Orca"}, ValueError("x")),
        ],
    )
    def test_all_are_similarity_errors(self, error):
        assert isinstance(error, SimilarityError)
        assert is_similarity_error(error)

    def test_other_exceptions(self):
        assert not is_similarity_error(ValueError("x"))
        assert get_similarity_error_code(ValueError("x")) == "UNKNOWN_ERROR"


class TestCodes:
    def test_codes(self):
        assert get_similarity_error_code(SimilarityError("x")) == "SIMILARITY_ERROR"
        assert (
            get_similarity_error_code(SimilarityConfigurationError("x"))
            == "SIMILARITY_CONFIG_INVALID"
        )
        assert (
            get_similarity_error_code(SimilarityInputError("f", 1, "r"))
            == "SIMILARITY_INPUT_INVALID"
        )
        assert (
            get_similarity_error_code(SimilarityCalculationError("a", ValueError()))
            == "SIMILARITY_CALCULATION_FAILED"
        )
        assert (
            get_similarity_error_code(DuplicateDetectionError({}, ValueError()))
            == "DUPLICATE_DETECTION_FAILED"
        )


class TestContext:
    def test_input_error_context(self):
        error = SimilarityInputError("lat", 123.0, "latitude out of range")

        assert str(error) == "Invalid input for lat: latitude out of range"
        assert error.context == {
            "field": "lat",
            "value": 123.0,
            "reason": "latitude out of range",
        }

    def test_calculation_error_keeps_artwork_id(self):
        error = SimilarityCalculationError("art-9", RuntimeError("boom"))

        assert error.artwork_id == "art-9"
        assert error.context == {"artwork_id": "art-9"}
        assert "art-9" in str(error)
        assert "boom" in str(error)

    def test_detection_error_context(self):
        error = DuplicateDetectionError({"title": "Orca"}, RuntimeError("boom"))
        assert error.context == {"query": {"title": "Orca"}}


class TestToDict:
    def test_without_cause(self):
        data = SimilarityConfigurationError("bad weights", {"total": 1.2}).to_dict()

        assert data["name"] == "SimilarityConfigurationError"
        assert data["message"] == "bad weights"
        assert data["code"] == "SIMILARITY_CONFIG_INVALID"
        assert data["context"] == {"total": 1.2}
        assert data["cause"] is None
        assert "timestamp" in data

    def test_with_cause(self):
        try:
            try:
                raise RuntimeError("disk gone")
            except RuntimeError as e:
                raise SimilarityCalculationError("art-1", e) from e
        except SimilarityCalculationError as error:
            data = error.to_dict()

        assert data["cause"] == {"name": "RuntimeError", "message": "disk gone"}
