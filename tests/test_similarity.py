"""
Tests for the cross-linguistic similarity engine.

Run with: pytest tests/test_similarity.py -v
"""

from phonemic_analysis.models import LanguageRecord
from phonemic_analysis.seed import english, hawaiian, rotokas, seed_languages
from phonemic_analysis.similarity import (
    DEFAULT_EQUIVALENCE,
    FunctionalEquivalence,
    compare_all_pairs,
    compare_languages,
    compare_segments,
)


def language(segments, lang_id=1) -> LanguageRecord:
    return LanguageRecord(id=lang_id, name=f"L{lang_id}", elementary_segments=list(segments))


class TestJaccard:
    """Raw set similarity."""

    def test_rotokas_vs_hawaiian(self):
        """Rotokas and Hawaiian share four of seven segments."""
        report = compare_languages(rotokas(), hawaiian())

        assert report.shared == sorted(["a", "ə", "w", "j"])
        assert report.jaccard == 57.1
        assert report.unique1 == ["k"]
        assert report.unique2 == sorted(["ʔ", "h"])
        assert report.size_difference == 1

    def test_self_comparison(self):
        """A language compared with itself is identical."""
        report = compare_languages(english(), english())

        assert report.jaccard == 100.0
        assert report.functional_jaccard == 100.0
        assert report.unique1 == []
        assert report.unique2 == []
        assert report.shared == sorted(english().elementary_segments)

    def test_both_empty_is_zero(self):
        """Empty inventories give 0.0 rather than dividing by zero."""
        report = compare_languages(language([]), language([], 2))

        assert report.jaccard == 0.0
        assert report.functional_jaccard == 0.0
        assert report.shared == []

    def test_one_empty(self):
        """One empty side shares nothing."""
        report = compare_segments(["a", "b"], [])

        assert report.jaccard == 0.0
        assert report.unique1 == ["a", "b"]

    def test_none_inventory(self):
        """A missing inventory is treated as empty."""
        report = compare_segments(None, ["a"])

        assert report.jaccard == 0.0
        assert report.unique2 == ["a"]

    def test_case_sensitive(self):
        """Symbols differing only in case are different segments."""
        report = compare_segments(["N"], ["n"])

        assert report.shared == []
        assert report.jaccard == 0.0


class TestFunctionalEquivalence:
    """Similarity counting k ≈ ʔ as shared."""

    def test_rotokas_vs_hawaiian(self):
        """k in Rotokas matches ʔ in Hawaiian: five of seven."""
        report = compare_languages(rotokas(), hawaiian())

        assert report.functional_jaccard == 71.4
        assert report.functional_matches == [("k", "ʔ")]
        assert report.functional_intersection == sorted(["a", "ə", "w", "j", "k"])

    def test_disjoint_equivalent_singletons(self):
        """{k} vs {ʔ} share nothing raw, one functional match over a union of two."""
        report = compare_segments(["k"], ["ʔ"])

        assert report.jaccard == 0.0
        assert report.functional_jaccard == 50.0
        assert report.functional_matches == [("k", "ʔ")]

    def test_no_double_count_when_partner_shared(self):
        """A segment already shared is not matched again by equivalence."""
        forward = compare_segments(["k", "ʔ"], ["ʔ"])
        backward = compare_segments(["ʔ"], ["k", "ʔ"])

        assert forward.functional_jaccard == backward.functional_jaccard == 50.0

    def test_rotokas_vs_english(self):
        """English ʔ pairs with Rotokas k."""
        report = compare_languages(rotokas(), english())

        assert report.jaccard == 11.8
        assert report.functional_jaccard == 17.6

    def test_custom_relation(self):
        """Extra pairs generalize the relation without code changes."""
        relation = FunctionalEquivalence([("k", "ʔ"), ("h", "x")])
        report = compare_segments(["k", "h"], ["ʔ", "x"], relation)

        assert report.functional_jaccard == 50.0
        assert report.functional_matches == [("h", "x"), ("k", "ʔ")]

    def test_many_to_one_relation_is_symmetric(self):
        """One segment equivalent to two others is matched only once."""
        relation = FunctionalEquivalence([("k", "ʔ"), ("k", "h")])
        forward = compare_segments(["k"], ["ʔ", "h"], relation)
        backward = compare_segments(["ʔ", "h"], ["k"], relation)

        assert forward.functional_jaccard == backward.functional_jaccard == 33.3
        assert len(forward.functional_matches) == 1

    def test_relation_is_symmetric(self):
        """Pairs are stored in both directions."""
        relation = FunctionalEquivalence.from_mapping({"k": ["ʔ"]})

        assert relation.are_equivalent("k", "ʔ")
        assert relation.are_equivalent("ʔ", "k")
        assert relation.equivalents("ʔ") == frozenset({"k"})
        assert relation.pairs() == [("k", "ʔ")]

    def test_default_relation(self):
        """The default relation is k ≈ ʔ only."""
        assert len(DEFAULT_EQUIVALENCE) == 1
        assert DEFAULT_EQUIVALENCE.are_equivalent("k", "ʔ")
        assert not DEFAULT_EQUIVALENCE.are_equivalent("k", "h")

    def test_empty_relation(self):
        """With no equivalences functional and raw similarity agree."""
        report = compare_languages(rotokas(), hawaiian(), FunctionalEquivalence())

        assert report.functional_jaccard == report.jaccard


class TestSymmetry:
    """Argument order only swaps the unique lists."""

    def test_swap_arguments(self):
        """Scores and shared segments are symmetric."""
        for a in seed_languages():
            for b in seed_languages():
                ab = compare_languages(a, b)
                ba = compare_languages(b, a)

                assert ab.jaccard == ba.jaccard
                assert ab.functional_jaccard == ba.functional_jaccard
                assert ab.shared == ba.shared
                assert ab.unique1 == ba.unique2
                assert ab.unique2 == ba.unique1

    def test_all_pairs(self):
        """Every unordered pair is compared once, keyed by ids."""
        results = compare_all_pairs(seed_languages())

        assert list(results) == [(1, 2), (1, 3), (2, 3)]
        assert results[(1, 2)].jaccard == 57.1

    def test_to_dict(self):
        """Reports serialize to plain values."""
        data = compare_languages(rotokas(), hawaiian()).to_dict()

        assert data["jaccard"] == 57.1
        assert data["functional_matches"] == [["k", "ʔ"]]
