"""
Unit tests for settings layers and the combinator.
"""

from dataclasses import FrozenInstanceError

import pytest

from nativegen.config.settings import (
    DEBUG_SETTINGS,
    DEFAULT_PROFILE_SETTINGS,
    EMPTY_SETTINGS,
    RELEASE_SETTINGS,
    SCALAR_FIELDS,
    SEQUENCE_FIELDS,
    Settings,
    combine,
    combine_all,
)
from nativegen.config.types import CXXStandard, Optimize


@pytest.mark.unit
class TestCombine:
    """Test precedence and concatenation rules."""

    def test_first_scalar_wins(self):
        primary = Settings(optimize=Optimize.FULL)
        fallback = Settings(optimize=Optimize.NONE, warning_level=2)

        result = combine(primary, fallback)

        assert result.optimize is Optimize.FULL
        assert result.warning_level == 2

    def test_false_is_a_value(self):
        result = combine(Settings(enable_rtti=False), Settings(enable_rtti=True))
        assert result.enable_rtti is False

    def test_sequences_concatenate_primary_first(self):
        primary = Settings(defines=("A",))
        fallback = Settings(defines=("B", "A"))

        assert combine(primary, fallback).defines == ("A", "B", "A")

    def test_not_commutative(self):
        full = Settings(optimize=Optimize.FULL)
        none = Settings(optimize=Optimize.NONE)

        assert combine(full, none).optimize is Optimize.FULL
        assert combine(none, full).optimize is Optimize.NONE

    def test_self_combination_doubles_sequences(self):
        layer = Settings(libs=("m", "dl"), warning_level=4)

        result = combine(layer, layer)

        assert result.libs == ("m", "dl", "m", "dl")
        assert result.warning_level == 4

    def test_empty_sequences_stay_empty(self):
        result = combine(EMPTY_SETTINGS, EMPTY_SETTINGS)
        for name in SEQUENCE_FIELDS:
            assert getattr(result, name) == ()
        for name in SCALAR_FIELDS:
            assert getattr(result, name) is None

    def test_inputs_untouched(self):
        primary = Settings(defines=("A",))
        fallback = Settings(defines=("B",))

        combine(primary, fallback)

        assert primary.defines == ("A",)
        assert fallback.defines == ("B",)
        with pytest.raises(FrozenInstanceError):
            primary.defines = ()

    def test_every_field_follows_its_rule(self):
        primary = Settings(
            **{name: ("p",) for name in SEQUENCE_FIELDS},
            warning_level=1,
        )
        fallback = Settings(
            **{name: ("f",) for name in SEQUENCE_FIELDS},
            warning_level=4,
            cxx_standard=CXXStandard.CXX20,
        )

        result = combine(primary, fallback)

        for name in SEQUENCE_FIELDS:
            assert getattr(result, name) == ("p", "f")
        assert result.warning_level == 1
        assert result.cxx_standard is CXXStandard.CXX20


@pytest.mark.unit
class TestCombineAll:
    """Test folding a fallback chain."""

    def test_no_layers(self):
        assert combine_all() == EMPTY_SETTINGS

    def test_fold_matches_pairwise_combination(self):
        a = Settings(defines=("A",), optimize=Optimize.SIZE)
        b = Settings(defines=("B",), optimize=Optimize.FULL, warning_level=0)
        c = Settings(defines=("C",), warning_level=4, enable_rtti=True)

        result = combine_all(a, b, c)

        assert result == combine(combine(a, b), c)
        assert result.defines == ("A", "B", "C")
        assert result.optimize is Optimize.SIZE
        assert result.warning_level == 0
        assert result.enable_rtti is True


@pytest.mark.unit
class TestBuiltinProfiles:
    """Test the Debug and Release defaults."""

    def test_names(self):
        assert sorted(DEFAULT_PROFILE_SETTINGS) == ["Debug", "Release"]

    def test_debug(self):
        assert DEBUG_SETTINGS.warning_level == 3
        assert DEBUG_SETTINGS.warning_as_error is False
        assert DEBUG_SETTINGS.optimize is Optimize.NONE
        assert DEBUG_SETTINGS.link_incremental is True

    def test_release(self):
        assert RELEASE_SETTINGS.warning_as_error is True
        assert RELEASE_SETTINGS.optimize is Optimize.FULL
        assert RELEASE_SETTINGS.strict_aliasing is True
        assert RELEASE_SETTINGS.omit_frame_pointer is True
        assert RELEASE_SETTINGS.link_incremental is False


@pytest.mark.unit
class TestSettingsViews:
    """Test plain-data conversion."""

    def test_to_dict_keeps_set_fields(self):
        settings = Settings(optimize=Optimize.FULL, defines=("A",), enable_rtti=False)

        assert settings.to_dict() == {
            "optimize": "Full",
            "defines": ["A"],
            "enable_rtti": False,
        }

    def test_is_empty(self):
        assert EMPTY_SETTINGS.is_empty()
        assert Settings().is_empty()
        assert not Settings(libs=("m",)).is_empty()
