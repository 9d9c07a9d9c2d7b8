"""Tests for the first-fit line-break algorithm."""
import logging
import math

import pytest

from first_fit import FirstFit, FirstFitConfig, first_fit_breaks
from linebreak_num import FIXED, I16F16, I32F32, FixedArithmetic
from linebreak_specs import Box, Glue, Line, Penalty, convert_paragraph, line_spans

from paragraphs import (HITCHHIKER, HITCHHIKER_LONG_WORD, aaa_bbb,
        char_paragraph, render, word_paragraph)


def test_breaks_at_the_glue():
    lines = first_fit_breaks(aaa_bbb(), 3, threshold=math.inf)
    assert lines == [Line(3, 0), Line(8, 0)]


def test_single_line_when_everything_fits():
    lines = first_fit_breaks(aaa_bbb(), 7, threshold=math.inf)
    assert lines == [Line(8, 0)]


def test_default_threshold_fits_exact_lines():
    assert first_fit_breaks(aaa_bbb(), 3) == [Line(3, 0), Line(8, 0)]


def test_default_threshold_rejects_loose_breakpoints():
    # The first space of "aa bb" has no stretch before it, so its ratio is inf
    assert first_fit_breaks(word_paragraph(["aa", "bb"]), 10) == []


def test_empty_paragraph():
    assert first_fit_breaks([], 10) == []


def test_overfull_line_fails_without_overflow():
    assert first_fit_breaks(aaa_bbb(), 2, threshold=math.inf) == []


def test_overfull_line_is_clamped_with_overflow():
    # "aaaa bb" at width 3: the first word does not fit on any line
    lines = first_fit_breaks(word_paragraph(["aaaa", "bb"]), 3, threshold=math.inf,
            allow_overflow=True)
    assert lines == [Line(4, 0), Line(8, 0)]


def test_mandatory_break_inside_paragraph():
    items = [Box(1), Glue(1, 1, 0), Box(1), Penalty(0, -math.inf), Box(1),
             Glue(0, math.inf, 0), Penalty(0, -math.inf, True)]
    lines = first_fit_breaks(items, 10, threshold=math.inf)
    assert [line.break_at for line in lines] == [3, 6]


def test_shrinking_glue():
    # "aa bb cc" at width 7: shrinking both spaces by 1/2 fits it on one line
    items = word_paragraph(["aa", "bb", "cc"], space=(1, 1, 1))
    lines = first_fit_breaks(items, 7, threshold=math.inf)
    assert [line.break_at for line in lines] == [9]
    assert lines[0].adjustment_ratio == -0.5


def test_variable_line_widths():
    items = word_paragraph(["aa", "bb", "cc", "dd", "ee"])
    lines = first_fit_breaks(items, [5, 8], threshold=math.inf)
    assert lines == [Line(5, 0), Line(15, 0)]


def test_overflow_layout_of_long_paragraph():
    lines = first_fit_breaks(char_paragraph(HITCHHIKER_LONG_WORD, end_stretch=100000), 80,
            threshold=math.inf, allow_overflow=True)
    assert render(HITCHHIKER_LONG_WORD, lines) == [
        "FaroutintheunchartedbackwatersoftheunfashionableendofthewesternspiralarmoftheGalaxy",
        "lies a small unregarded yellow sun. Orbiting this at a distance of roughly",
        "ninety-two million miles is an utterly insignificant little blue-green planet",
        "whose ape-descended life forms are so amazingly primitive that they still think",
        "digital watches are a pretty neat idea.",
    ]
    assert lines[0].adjustment_ratio == 0


def test_long_word_fails_without_overflow():
    items = char_paragraph(HITCHHIKER_LONG_WORD, end_stretch=100000)
    assert first_fit_breaks(items, 80, threshold=math.inf) == []


def test_break_positions_are_increasing_and_end_the_paragraph():
    items = char_paragraph(HITCHHIKER, end_stretch=math.inf)
    lines = first_fit_breaks(items, 60, threshold=math.inf)
    positions = [line.break_at for line in lines]
    assert positions == sorted(set(positions))
    assert positions[-1] == len(items) - 1
    for start, end in line_spans(items, lines):
        assert end - start <= 60
        assert not items[end - 1].is_glue()


def test_layout_is_pure():
    items = char_paragraph(HITCHHIKER, end_stretch=math.inf)
    before = [item.copy() for item in items]
    layout = FirstFit(threshold=math.inf)
    assert layout.layout_paragraph(items, 50) == layout.layout_paragraph(items, 50)
    assert items == before


def test_fixed_point_matches_float():
    items = char_paragraph(HITCHHIKER, end_stretch=math.inf)
    num = FixedArithmetic(I32F32)
    float_lines = first_fit_breaks(items, 70, threshold=math.inf)
    fixed_lines = first_fit_breaks(convert_paragraph(items, num), 70, threshold=math.inf, num=num)
    assert [line.break_at for line in fixed_lines] == [line.break_at for line in float_lines]
    for f, x in zip(float_lines, fixed_lines):
        assert x.adjustment_ratio.to_float() == pytest.approx(f.adjustment_ratio, abs=1e-6)


def test_fixed_point_scenario():
    items = convert_paragraph(aaa_bbb(), FIXED)
    lines = first_fit_breaks(items, I16F16.from_num(3), threshold=math.inf, num=FIXED)
    assert [line.break_at for line in lines] == [3, 8]
    assert lines[0].adjustment_ratio == 0


def test_config_object_and_defaults():
    layout = FirstFit(FirstFitConfig(allow_overflow=True))
    assert layout.config.threshold == 1
    assert layout.config.allow_overflow
    assert FirstFit(FirstFitConfig(), threshold=5).config.threshold == 5


def test_overflow_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="first_fit"):
        first_fit_breaks(aaa_bbb(), 2, threshold=math.inf, allow_overflow=True)
    assert "overflows" in caplog.text
