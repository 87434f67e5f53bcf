import dataclasses
import logging
from random import Random

import pytest

from mkpw.generator import (
    Classifier,
    PasswordMaker,
    PasswordConfigError,
    InvalidLengthError,
    InconsistentClassifierError,
    OverConstrainedError,
    EmptyPoolError,
    SYMBOL_CANDIDATES,
    generate,
)
from mkpw.graphemes import split_graphemes


def _bare_maker(length, others=(), rng=None):
    """A maker with the four built-in classes switched off."""
    return PasswordMaker(
        length=length,
        lowercase=Classifier(),
        uppercase=Classifier(),
        number=Classifier(),
        symbol=Classifier(),
        others=list(others),
        rng=rng or Random(0),
    )


def test_length_and_classes():
    pw = PasswordMaker().generate()
    assert len(split_graphemes(pw)) == 16
    assert any(c.isupper() for c in pw)
    assert any(c.islower() for c in pw)
    assert any(c.isdigit() for c in pw)
    assert any(c in SYMBOL_CANDIDATES for c in pw)


def test_four_class_scenario_holds_for_many_seeds():
    for seed in range(50):
        pw = PasswordMaker(length=16, rng=Random(seed)).generate()
        assert len(pw) == 16
        assert sum(c.islower() for c in pw) >= 1
        assert sum(c.isupper() for c in pw) >= 1
        assert sum(c.isdigit() for c in pw) >= 1
        assert sum(c in SYMBOL_CANDIDATES for c in pw) >= 1


def test_seeded_rng_is_reproducible():
    a = PasswordMaker(rng=Random(1234)).generate_many(3)
    b = PasswordMaker(rng=Random(1234)).generate_many(3)
    assert a == b
    # consecutive draws from one stream differ
    assert len(set(a)) == 3


def test_minimum_counts_are_met():
    maker = _bare_maker(12, rng=Random(7))
    maker.lowercase = Classifier(("x",), 5)
    maker.uppercase = Classifier(("Y",), 3)
    maker.number = Classifier(("7", "8"), 0)
    for _ in range(20):
        pw = maker.generate()
        assert len(pw) == 12
        assert pw.count("x") >= 5
        assert pw.count("Y") >= 3
        assert set(pw) <= {"x", "Y", "7", "8"}


def test_mandatory_characters_move_around():
    maker = _bare_maker(10, rng=Random(42))
    maker.lowercase = Classifier(("a",), 1)
    maker.uppercase = Classifier(("B",), 0)
    positions = {maker.generate().index("a") for _ in range(50)}
    assert len(positions) > 1


def test_only_given_candidates_are_used():
    maker = PasswordMaker(length=1000, rng=Random(5))
    maker.uppercase = Classifier(("A", "M", "N", "Z"), 1)
    pw = maker.generate()
    uppers = {c for c in pw if c.isupper()}
    assert uppers == {"A", "M", "N", "Z"}


def test_class_can_be_left_out():
    maker = PasswordMaker(length=500, rng=Random(9))
    maker.number = Classifier()
    pw = maker.generate()
    assert not any(c.isdigit() for c in pw)


def test_emoji_clusters_stay_intact():
    family = "👨‍👩‍👦"
    rainbow = "🏳️‍🌈"
    others = [Classifier.from_text(family + rainbow + "🇯🇵", 3)]
    maker = _bare_maker(20, others=others, rng=Random(3))
    maker.lowercase = Classifier.from_text("ab", 0)
    allowed = {"a", "b", family, rainbow, "🇯🇵"}
    for _ in range(20):
        clusters = split_graphemes(maker.generate())
        assert len(clusters) == 20
        assert set(clusters) <= allowed
        assert sum(c in (family, rainbow, "🇯🇵") for c in clusters) >= 3


def test_candidates_are_concatenated_not_deduplicated():
    maker = _bare_maker(4)
    maker.number = Classifier(("1", "2"), 0)
    maker.others = [Classifier(("1",), 0)]
    assert maker.candidates() == ["1", "2", "1"]


def test_exclude_similar():
    maker = PasswordMaker(length=1000, exclude_similar=True, rng=Random(11))
    pw = maker.generate()
    assert not any(c in "il1o0O" for c in pw)
    assert "0" not in maker.candidates()

    maker.exclude_similar = False
    pw = maker.generate()
    assert any(c in "il1o0O" for c in pw)


def test_exclude_similar_can_empty_a_classifier():
    maker = PasswordMaker()
    maker.number = Classifier(("0", "1"), 1)
    maker.exclude_similar = True
    with pytest.raises(InconsistentClassifierError) as exc:
        maker.generate()
    assert exc.value.name == "Numbers"


def test_include_whitespace_adds_space_to_pool():
    maker = _bare_maker(200, rng=Random(1))
    maker.lowercase = Classifier(("a",), 0)
    assert " " not in maker.candidates()
    maker.include_whitespace = True
    assert maker.candidates() == ["a", " "]
    assert " " in maker.generate()


def test_zero_length_fails():
    maker = PasswordMaker(length=0)
    with pytest.raises(InvalidLengthError):
        maker.generate()


def test_length_is_checked_first():
    # also over-constrained, but the length problem is reported
    maker = PasswordMaker(length=0)
    with pytest.raises(InvalidLengthError):
        maker.validate()


def test_inconsistent_classifier_fails():
    maker = _bare_maker(5, others=[Classifier((), 2)])
    maker.lowercase = Classifier(("a",), 0)
    with pytest.raises(InconsistentClassifierError) as exc:
        maker.generate()
    assert exc.value.name == "Other characters at index 0"
    assert exc.value.minimum_count == 2
    assert "Other characters at index 0 is empty" in str(exc.value)


def test_inconsistent_named_class_fails():
    maker = PasswordMaker()
    maker.symbol = Classifier((), 1)
    with pytest.raises(InconsistentClassifierError) as exc:
        maker.generate()
    assert exc.value.name == "Symbols"


def test_over_constrained_fails():
    maker = _bare_maker(3, others=[Classifier(("a",), 2), Classifier(("b",), 2)])
    with pytest.raises(OverConstrainedError) as exc:
        maker.generate()
    assert exc.value.total == 4
    assert exc.value.length == 3


def test_default_minimums_need_four_characters():
    with pytest.raises(OverConstrainedError):
        PasswordMaker(length=3).generate()
    assert len(PasswordMaker(length=4).generate()) == 4


def test_empty_pool_fails():
    maker = _bare_maker(8, others=[Classifier()])
    with pytest.raises(EmptyPoolError):
        maker.generate()


def test_errors_are_value_errors():
    for err in (InvalidLengthError, InconsistentClassifierError, OverConstrainedError, EmptyPoolError):
        assert issubclass(err, PasswordConfigError)
        assert issubclass(err, ValueError)


def test_config_can_change_between_calls():
    maker = PasswordMaker(length=8, rng=Random(2))
    assert len(maker.generate()) == 8
    maker.length = 32
    assert len(maker.generate()) == 32
    maker.length = 0
    with pytest.raises(InvalidLengthError):
        maker.generate()


def test_generate_many():
    maker = PasswordMaker()
    passwords = maker.generate_many(5)
    assert len(passwords) == 5
    assert len(set(passwords)) == 5
    assert maker.generate_many(0) == []
    with pytest.raises(ValueError):
        maker.generate_many(-1)


def test_classifier_is_immutable():
    c = Classifier(["a", "b"], 1)
    assert c.candidates == ("a", "b")
    with pytest.raises(dataclasses.FrozenInstanceError):
        c.minimum_count = 2


def test_classifier_rejects_negative_minimum():
    with pytest.raises(ValueError):
        Classifier(("a",), -1)


def test_classifier_from_text_splits_graphemes():
    c = Classifier.from_text("áパ👍🏿", 1)
    assert c.candidates == ("á", "パ", "👍🏿")
    c.validate("x")


def test_module_generate():
    assert len(generate(length=12)) == 12
    assert generate(length=10, rng=Random(8)) == generate(length=10, rng=Random(8))
    pw = generate(length=6, others=[Classifier(("★",), 2)])
    assert pw.count("★") >= 2


def test_debug_log_reports_grapheme_clusters(caplog):
    maker = _bare_maker(5, others=[Classifier.from_text("👨‍👩‍👦", 1)])
    maker.lowercase = Classifier(("a",), 0)
    with caplog.at_level(logging.DEBUG, logger="mkpw.generator"):
        maker.generate()
    assert "(5 grapheme clusters)" in caplog.text
    # the password itself is never logged
    assert "👨‍👩‍👦" not in caplog.text
