"""Paragraph builders shared by the tests."""
import math

from linebreak_specs import Box, Glue, Penalty, paragraph_end

HITCHHIKER = (
    "  Far out in the uncharted backwaters of the unfashionable end of the western spiral arm "
    "of the Galaxy lies a small unregarded yellow sun. Orbiting this at a distance of roughly "
    "ninety-two million miles is an utterly insignificant little blue-green planet whose "
    "ape-descended life forms are so amazingly primitive that they still think digital "
    "watches are a pretty neat idea."
)

HITCHHIKER_LONG_WORD = (
    "FaroutintheunchartedbackwatersoftheunfashionableendofthewesternspiralarmoftheGalaxy "
    "lies a small unregarded yellow sun. Orbiting this at a distance of roughly ninety-two "
    "million miles is an utterly insignificant little blue-green planet whose ape-descended "
    "life forms are so amazingly primitive that they still think digital watches are a "
    "pretty neat idea."
)


def char_paragraph(text, end_stretch=None, space=(1, 1, 0)):
    """
    One item per character: whitespace becomes Glue(*space) (except as the
    first character), everything else Box(1). Ends with an optional filling
    glue and a flagged mandatory break.
    """
    items = []
    for ch in text:
        if ch.isspace() and items:
            items.append(Glue(*space))
        else:
            items.append(Box(1))
    if end_stretch is not None:
        items.append(Glue(0, end_stretch, 0))
    items.append(Penalty(0, -math.inf, True))
    return items


def word_paragraph(words, space=(1, 1, 0)):
    """Each character of a word is a Box(1); words are separated by a Glue."""
    items = []
    for i, word in enumerate(words):
        if i > 0:
            items.append(Glue(*space))
        items.extend(Box(1) for _ in word)
    items.append(Glue(0, math.inf, 0))
    items.append(Penalty(0, -math.inf, True))
    return items


def aaa_bbb():
    return [Box(1), Box(1), Box(1), Glue(1, 1, 0), Box(1), Box(1), Box(1),
            Glue(0, math.inf, 0), Penalty(0, -math.inf, True)]


def standard_paragraph(text):
    """Like `char_paragraph`, but closed with `paragraph_end()`."""
    items = char_paragraph(text)[:-1]
    items.extend(paragraph_end())
    return items


def render(text, lines):
    """Cuts a one-item-per-character paragraph into the text of its lines."""
    out = []
    start = 0
    cursor = 0
    for i, _ in enumerate(text):
        if cursor < len(lines) and i == lines[cursor].break_at:
            out.append(text[start:i])
            start = i + 1
            cursor += 1
    out.append(text[start:])
    return out
