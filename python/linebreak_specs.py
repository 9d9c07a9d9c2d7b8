"""
The Glue, Box, and Penalty specifications that describe a paragraph, plus the
    pieces of math that every line-breaking algorithm needs to agree on.

A paragraph is just a list of Glue, Box, and Penalty objects:

    Glue:    The spaces that can have variable width. Have a default width,
        but can shrink by `shrink` amount and stretch by `stretch` amount. You
        can break a line at a Glue, but only if a Box comes right before it.

    Box:     An object of a static width such as a character like 'a', 'A',
        'b', '1', '2', etc. The algorithms only look at the width, so it could
        be a picture too, or something else. You can never break at a Box.

    Penalty: A place where you are specifically talking about whether to break
        the line or not. A cost of +INFINITY is a place where you cannot break
        and a cost of -INFINITY is a place where you have to break. The width
        of a penalty is the width of the typesetting material (the hyphen if
        breaking inside a word) that is added only if you break here.

Every paragraph MUST end with a mandatory break (a Penalty with cost
    -INFINITY), usually preceded by a Glue that can stretch infinitely so the
    last line does not have to be justified. The algorithms never append it for
    you; `paragraph_end()` gives you the standard ending to extend your list
    with.

The result of a layout is a list of `Line`s: the index of the item each line
    breaks at and the adjustment ratio to apply to the line's glue.
"""
import logging
from collections import namedtuple
from typing import Iterator, List, Sequence, Tuple, Union

from linebreak_num import FLOAT, Arithmetic, Num

logger = logging.getLogger(__name__)

GLUE, BOX, PENALTY = 1, 2, 3

# =============================================================================
# Specifications (Glue, Box, Penalty)
# -----------------------------------------------------------------------------

class Specification:
    t = None # the type of the Spec (GLUE, BOX, or PENALTY)

    def is_glue(self):    return self.t == GLUE
    def is_box(self):     return self.t == BOX
    def is_penalty(self): return self.t == PENALTY

    def _fields(self):
        return tuple(getattr(self, name) for name in self.__slots__)

    def __eq__(self, o:object):
        if isinstance(o, self.__class__):
            return o._fields() == self._fields()
        return NotImplemented

    def __hash__(self):
        return hash((self.t, self._fields()))

class Box(Specification):
    """
    A box refers to something that is to be typeset: a character, a word, a
        picture. The line-breaking algorithms do not peek inside a box, so it
        only has a width.
    """
    __slots__ = ['width']
    t = BOX

    def __init__(self, width:Num):
        self.width = width

    def copy(self):
        return Box(self.width)

    def __repr__(self):
        return f'<{self.__class__.__name__}(width={self.width})>'

class Glue(Specification):
    """
    Glue refers to blank space that can vary its width in specified ways; it is
        an elastic mortar used between boxes in a typeset line.

        width:   ideal width
        stretch: how much the glue stretches when a line is stretched by a
            ratio of 1
        shrink:  the max you can lessen the width by
    """
    __slots__ = ['width', 'stretch', 'shrink']
    t = GLUE

    def __init__(self, width:Num, stretch:Num, shrink:Num):
        self.width   = width
        self.stretch = stretch
        self.shrink  = shrink

    def r_width(self, r:Num):
        """
        Returns the width of this glue for the given adjustment ratio r.
        """
        if r < 0:
            # As r is negative, will be subtracting width
            return self.width + (r * self.shrink)
        return self.width + (r * self.stretch)

    def copy(self):
        return Glue(self.width, self.stretch, self.shrink)

    def __repr__(self):
        return f'<{self.__class__.__name__}(width={self.width}, stretch={self.stretch}, shrink={self.shrink})>'

class Penalty(Specification):
    """
    Penalty specifications refer to potential places to end one line of a
        paragraph and begin another, with a certain 'aesthetic cost' indicating
        how desirable or undesirable such a breakpoint would be. A flagged
        penalty (typically a hyphen) is one that should not end two lines in
        a row.
    """
    __slots__ = ['width', 'cost', 'flagged']
    t = PENALTY

    def __init__(self, width:Num, cost:Num, flagged:bool=False):
        self.width   = width   # Width of extra typeset material (width of the hyphen)
        self.cost    = cost    # The cost of breaking here
        self.flagged = flagged # Whether there is a hyphen here

    def copy(self):
        return Penalty(self.width, self.cost, self.flagged)

    def __repr__(self):
        return f'<{self.__class__.__name__}(width={self.width}, cost={self.cost}, flagged={self.flagged})>'

Spec = Union[Glue, Box, Penalty]

# =============================================================================
# Queries on Specs
# -----------------------------------------------------------------------------

def penalty_cost(spec:Spec, num:Arithmetic=FLOAT):
    return spec.cost if spec.t == PENALTY else num.zero

def penalty_flag(spec:Spec, num:Arithmetic=FLOAT):
    """The flag of a Penalty as the number 1 or 0 (always 0 for others)."""
    if spec.t == PENALTY and spec.flagged:
        return num.of(1)
    return num.zero

def is_mandatory_break(spec:Spec, num:Arithmetic=FLOAT) -> bool:
    return spec.t == PENALTY and spec.cost == num.NEG_INFINITY

def is_legal_breakpoint(spec:Spec, preceding:Spec=None, num:Arithmetic=FLOAT):
    """
    Returns (width, stretch, shrink, legal) for the given spec: how much it
        adds to the running totals of the paragraph and whether a line may be
        broken at it.

    A Penalty adds nothing to the running totals. Its width is only counted by
        `adjustment_ratio()`, for the line that actually breaks at it.
    """
    zero = num.zero
    if spec.t == BOX:
        return spec.width, zero, zero, False
    elif spec.t == GLUE:
        return spec.width, spec.stretch, spec.shrink, \
                (preceding is not None and preceding.t == BOX)
    return zero, zero, zero, spec.cost != num.INFINITY

def adjustment_ratio(spec:Spec, width:Num, stretch:Num, shrink:Num, line_width:Num, num:Arithmetic=FLOAT):
    """
    Computes the adjustment ratio for a line that breaks at `spec`, where
        width, stretch, and shrink are the totals of the line's contents.

    This is how much you would have to shrink (if r < 0) or stretch (if r > 0)
        the glue of the line to make it exactly `line_width` long. A line that
        needs to stretch but has no stretch gives +INFINITY, one that needs to
        shrink but has no shrink gives -INFINITY.
    """
    zero = num.zero
    if spec.t == PENALTY:
        width = width + spec.width

    if width < line_width:
        if stretch > zero:
            return (line_width - width) / stretch
        return num.INFINITY
    elif width > line_width:
        if shrink > zero:
            return (line_width - width) / shrink
        return num.NEG_INFINITY
    return zero

def totals_after(paragraph:Sequence[Spec], b:int, width:Num, stretch:Num, shrink:Num, num:Arithmetic=FLOAT):
    """
    Given the running totals up to (not including) the breakpoint at `b`,
        returns the totals at which the line after the break starts: the
        glue and penalties that directly follow the break are discarded along
        with it, up to the next Box or the next mandatory break.
    """
    for i in range(b, len(paragraph)):
        spec = paragraph[i]
        if spec.t == BOX:
            break
        elif spec.t == GLUE:
            width   = width   + spec.width
            stretch = stretch + spec.stretch
            shrink  = shrink  + spec.shrink
        elif i > b and is_mandatory_break(spec, num):
            break
    return width, stretch, shrink

# =============================================================================
# Line Widths
# -----------------------------------------------------------------------------

def line_widths(line_width, num:Arithmetic=FLOAT) -> List:
    """
    Turns a single line width, or a sequence of line widths where the last one
        is reused for every line after it, into a list of widths in the given
        representation.
    """
    try:
        widths = [num.coerce(w) for w in line_width]
    except TypeError:
        widths = [num.coerce(line_width)]

    if len(widths) == 0:
        raise ValueError('At least one line width must be given')
    return widths

def line_width_for(widths:List, j:int):
    """Returns the width of the 1-based line number j."""
    return widths[j - 1] if j <= len(widths) else widths[-1]

def first_uniform_line(widths:List) -> int:
    """
    Returns the lowest line number from which every line has the same width
        (j0 in the paper).
    """
    j0 = len(widths)
    while j0 > 1 and widths[j0 - 2] == widths[j0 - 1]:
        j0 -= 1
    return j0

# =============================================================================
# Lines
# -----------------------------------------------------------------------------

class Line(namedtuple('Line', ['break_at', 'adjustment_ratio'])):
    """
    A single line of a laid-out paragraph.

    break_at: the index of the item at which this line breaks.
    adjustment_ratio: apply it to the line's glue when rendering. A negative
        ratio shrinks the glue by that multiple of its shrink, a positive one
        stretches it by that multiple of its stretch.
    """
    __slots__ = ()

    def glue_width(self, width:Num, stretch:Num, shrink:Num):
        """
        Returns the width of a glue with the given width, stretch, and shrink
            once this line's adjustment ratio is taken into account.
        """
        if self.adjustment_ratio < 0:
            return width + shrink * self.adjustment_ratio
        elif self.adjustment_ratio > 0:
            return width + stretch * self.adjustment_ratio
        return width

def line_spans(paragraph:Sequence[Spec], lines:Sequence[Line]) -> Iterator[Tuple[int, int]]:
    """
    Yields the (start, end) range of paragraph indices that make up the visible
        contents of each line.

    Glue and penalties at the start of every line but the first are skipped
        (they were discarded by the break before them). A line that breaks at
        a Glue does not include it, but one that breaks at a Penalty does, as
        the penalty may have typeset material (a hyphen) of its own.
    """
    start = 0
    for i, line in enumerate(lines):
        brk = line.break_at

        if i > 0:
            while start < brk and paragraph[start].t != BOX:
                start += 1

        end = brk + 1 if paragraph[brk].t == PENALTY else brk
        yield start, end
        start = brk + 1

# =============================================================================
# Building Paragraphs
# -----------------------------------------------------------------------------

def paragraph_end(num:Arithmetic=FLOAT) -> List[Spec]:
    """
    Returns the standard closing specs for a paragraph. Just extend your list
        of specs by it and it should end properly.
    """
    zero = num.zero
    return [Penalty(zero, num.INFINITY),            # Forced non-break (otherwise a Box before the Glue after this would allow a break here)
            Glue(zero, num.INFINITY, zero),         # Glue that fills the rest of the last line (even if that fill is 0 width)
            Penalty(zero, num.NEG_INFINITY, True)]  # Forced break (Ends last line)

def convert_paragraph(paragraph:Sequence[Spec], num:Arithmetic) -> List[Spec]:
    """
    Returns a copy of the given paragraph with every width, stretch, shrink,
        and cost converted to the given representation.
    """
    c = num.coerce
    out = []
    for spec in paragraph:
        if spec.t == BOX:
            out.append(Box(c(spec.width)))
        elif spec.t == GLUE:
            out.append(Glue(c(spec.width), c(spec.stretch), c(spec.shrink)))
        else:
            out.append(Penalty(c(spec.width), c(spec.cost), spec.flagged))
    return out

def check_paragraph_end(paragraph:Sequence[Spec], num:Arithmetic, log:logging.Logger=logger) -> None:
    """
    Logs a warning if the paragraph does not end with a mandatory break. Such a
        paragraph is still laid out, but its last line may be missing.
    """
    if len(paragraph) > 0 and not is_mandatory_break(paragraph[-1], num):
        log.warning('Paragraph of %d items does not end with a mandatory break', len(paragraph))

# =============================================================================
# Layout Interface
# -----------------------------------------------------------------------------

class ParagraphLayout:
    """
    A paragraph layout algorithm. Implementations return the laid-out lines
        from left to right, or an empty list if the paragraph cannot be laid
        out with their configuration.
    """
    def layout_paragraph(self, paragraph:Sequence[Spec], line_width) -> List[Line]:
        raise NotImplementedError
