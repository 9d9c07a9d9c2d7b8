"""
Implements the first-fit line-break algorithm: a single left-to-right pass
    over the paragraph that puts as much on each line as fits.

The algorithm only ever remembers one breakpoint, the last legal one it saw
    (`last_breakpoint`). When the line up to the current breakpoint would be
    overfull (adjustment ratio < -1) or looser than the threshold, or when the
    remembered breakpoint is a mandatory break, the line is cut at the
    remembered breakpoint. There is no backtracking, so the result can be a
    lot worse than the one `knuth_plass` finds, but it is also much cheaper.

Configuration (FirstFitConfig):
    threshold: the maximum adjustment ratio a breakpoint may have. Defaults to
        1. With a finite threshold, any breakpoint whose line so far is looser
        than the threshold (including the first space of a line, which has
        no stretch yet) makes the layout fail, so you will usually want
        +INFINITY here.
    allow_overflow: if True, a line that cannot be shrunk enough (a word that
        is longer than the line, for example) is still laid out, with an
        adjustment ratio of 0, instead of making the whole layout fail.
    num: the numeric capability (see `linebreak_num`). Defaults to FLOAT.
"""
import logging
from collections import namedtuple
from typing import List, Sequence

from linebreak_num import FLOAT
from linebreak_specs import (Line, ParagraphLayout, Spec, adjustment_ratio,
        check_paragraph_end, is_legal_breakpoint, is_mandatory_break,
        line_width_for, line_widths, totals_after)
from linebreak_tools import profile

logger = logging.getLogger(__name__)

FirstFitConfig = namedtuple('FirstFitConfig', ['threshold', 'allow_overflow', 'num'],
        defaults=[None, False, FLOAT])

class Breakpoint:
    """
    The breakpoint the algorithm is currently holding on to.
    """
    __slots__ = ['position', 'ratio', 'mandatory', 'width', 'stretch', 'shrink']
    def __init__(self, position:int, ratio, mandatory:bool, width, stretch, shrink):
        self.position  = position  # Index of the item to break at
        self.ratio     = ratio     # Adjustment ratio of the line if it breaks here
        self.mandatory = mandatory

        # The running totals at which the next line starts if we break here
        self.width     = width
        self.stretch   = stretch
        self.shrink    = shrink

    def __repr__(self):
        return f'<{self.__class__.__name__}(pos={self.position}, ratio={self.ratio}, mandatory={self.mandatory})>'


class FirstFit(ParagraphLayout):
    def __init__(self, config:FirstFitConfig=None, **options):
        """
        Takes either a FirstFitConfig or its fields as keyword arguments.
        """
        if config is None:
            config = FirstFitConfig(**options)
        elif options:
            config = config._replace(**options)

        num = config.num
        threshold = num.of(1) if config.threshold is None else num.coerce(config.threshold)
        self.config = config._replace(threshold=threshold)

    @profile()
    def layout_paragraph(self, paragraph:Sequence[Spec], line_width) -> List[Line]:
        """
        Breaks the given paragraph into lines of the given width (or widths,
            see `linebreak_specs.line_widths`). Returns an empty list if it
            cannot be done with this configuration.
        """
        threshold, allow_overflow, num = self.config
        widths = line_widths(line_width, num)

        if len(paragraph) == 0:
            return []
        check_paragraph_end(paragraph, num, logger)

        minus_one = num.of(-1)

        lines:List[Line] = []

        # Running totals of the paragraph up to the current item and the
        # running totals at which the current line started
        width = stretch = shrink = num.zero
        start_width = start_stretch = start_shrink = num.zero

        last_breakpoint = None
        for b, spec in enumerate(paragraph):
            w, y, z, legal = is_legal_breakpoint(spec, paragraph[b - 1] if b > 0 else None, num)

            if legal:
                lw = line_width_for(widths, len(lines) + 1)
                r = adjustment_ratio(spec, width - start_width, stretch - start_stretch,
                        shrink - start_shrink, lw, num)

                if last_breakpoint is not None and \
                        (r < minus_one or r > threshold or last_breakpoint.mandatory):
                    # Cut the line at the breakpoint we are holding
                    lines.append(Line(last_breakpoint.position, last_breakpoint.ratio))
                    start_width   = last_breakpoint.width
                    start_stretch = last_breakpoint.stretch
                    start_shrink  = last_breakpoint.shrink

                    lw = line_width_for(widths, len(lines) + 1)
                    r = adjustment_ratio(spec, width - start_width, stretch - start_stretch,
                            shrink - start_shrink, lw, num)

                if r < minus_one:
                    if not allow_overflow:
                        logger.debug('First fit: line %d cannot be shrunk enough to break at item %d',
                                len(lines) + 1, b)
                        return []
                    logger.debug('First fit: line %d overflows at item %d', len(lines) + 1, b)
                    r = num.zero

                if r > threshold:
                    logger.debug('First fit: line %d is too loose to break at item %d', len(lines) + 1, b)
                    return []

                last_breakpoint = Breakpoint(b, r, is_mandatory_break(spec, num),
                        *totals_after(paragraph, b, width, stretch, shrink, num))

            width   = width   + w
            stretch = stretch + y
            shrink  = shrink  + z

        if last_breakpoint is not None:
            lines.append(Line(last_breakpoint.position, last_breakpoint.ratio))

        logger.debug('First fit: %d items laid out in %d lines', len(paragraph), len(lines))
        return lines


def first_fit_breaks(paragraph:Sequence[Spec], line_width, **options) -> List[Line]:
    """
    Runs the first-fit algorithm once with the given options (the fields of
        FirstFitConfig).
    """
    return FirstFit(**options).layout_paragraph(paragraph, line_width)
