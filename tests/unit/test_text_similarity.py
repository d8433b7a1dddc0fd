"""Tests for title normalization and Jaro-Winkler similarity"""

import pytest

from artdedup.models.config import DEFAULT_STOP_WORDS
from artdedup.utils.text import (
    common_prefix_length,
    jaro_similarity,
    jaro_winkler_similarity,
    normalize_title,
)


class TestNormalizeTitle:
    def test_lowercases_and_strips_punctuation(self):
        assert normalize_title("Digital Orca!!") == "digital orca"

    def test_removes_stop_words(self):
        assert normalize_title("The Orca of the Harbour", DEFAULT_STOP_WORDS) == "orca harbour"

    def test_collapses_whitespace(self):
        assert normalize_title("  Digital \t  Orca \n") == "digital orca"

    def test_stop_words_only_become_empty(self):
        assert normalize_title("The A An", DEFAULT_STOP_WORDS) == ""

    def test_keeps_stop_words_without_list(self):
        assert normalize_title("The Orca") == "the orca"

    def test_stop_word_must_match_whole_word(self):
        assert normalize_title("Theatre Mural", DEFAULT_STOP_WORDS) == "theatre mural"

    def test_keeps_digits_and_underscores(self):
        assert normalize_title("Mural #42_b") == "mural 42_b"


class TestJaro:
    def test_identical(self):
        assert jaro_similarity("orca", "orca") == 1.0

    def test_empty(self):
        assert jaro_similarity("", "orca") == 0.0
        assert jaro_similarity("orca", "") == 0.0
        assert jaro_similarity("", "") == 1.0

    def test_no_common_characters(self):
        assert jaro_similarity("abc", "xyz") == 0.0

    def test_classic_examples(self):
        assert jaro_similarity("martha", "marhta") == pytest.approx(0.944444, abs=1e-5)
        assert jaro_similarity("dixon", "dicksonx") == pytest.approx(0.766667, abs=1e-5)

    def test_symmetric(self):
        assert jaro_similarity("dixon", "dicksonx") == pytest.approx(
            jaro_similarity("dicksonx", "dixon")
        )


class TestJaroWinkler:
    def test_identical(self):
        assert jaro_winkler_similarity("digital orca", "digital orca") == 1.0

    def test_classic_examples(self):
        assert jaro_winkler_similarity("martha", "marhta") == pytest.approx(
            0.961111, abs=1e-5
        )
        assert jaro_winkler_similarity("dixon", "dicksonx") == pytest.approx(
            0.813333, abs=1e-5
        )

    def test_prefix_boost(self):
        jaro = jaro_similarity("digital orca", "digital orca sculpture")
        winkler = jaro_winkler_similarity("digital orca", "digital orca sculpture")

        assert jaro == pytest.approx(0.848485, abs=1e-5)
        assert winkler == pytest.approx(jaro + 0.4 * (1 - jaro))
        assert winkler == pytest.approx(0.909091, abs=1e-5)

    def test_no_common_prefix_equals_jaro(self):
        assert jaro_winkler_similarity("xorca", "yorca") == pytest.approx(
            jaro_similarity("xorca", "yorca")
        )

    def test_bounded(self):
        pairs = [("a", "b"), ("orca", "orcas"), ("mural", "murals of vancouver")]
        for s1, s2 in pairs:
            assert 0.0 <= jaro_winkler_similarity(s1, s2) <= 1.0


class TestCommonPrefix:
    def test_capped_at_four(self):
        assert common_prefix_length("digital", "digitalis") == 4

    def test_partial(self):
        assert common_prefix_length("orca", "ore") == 2

    def test_none(self):
        assert common_prefix_length("orca", "whale") == 0
