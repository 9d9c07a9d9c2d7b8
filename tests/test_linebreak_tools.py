import logging
import math

import pytest

from knuth_plass import knuth_plass_breaks
from linebreak_tools import enable_profiling, profile, profiling_enabled

from paragraphs import aaa_bbb


@pytest.fixture
def profiling():
    enable_profiling()
    yield
    enable_profiling(False)


@profile()
def add(a, b):
    return a + b


def test_profile_does_nothing_by_default(caplog):
    assert not profiling_enabled()
    with caplog.at_level(logging.DEBUG, logger="linebreak_tools"):
        assert add(1, 2) == 3
    assert caplog.text == ""
    assert add.__name__ == "add"


def test_profile_logs_stats_when_enabled(profiling, caplog):
    assert profiling_enabled()
    with caplog.at_level(logging.DEBUG, logger="linebreak_tools"):
        assert add(1, 2) == 3
    assert "Profile of add" in caplog.text


def test_profiled_layout_gives_the_same_lines(profiling, caplog):
    with caplog.at_level(logging.DEBUG, logger="linebreak_tools"):
        lines = knuth_plass_breaks(aaa_bbb(), 3, threshold=math.inf)
    assert [line.break_at for line in lines] == [3, 8]
    assert "KnuthPlass.layout_paragraph" in caplog.text
