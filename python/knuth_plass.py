"""
A module that implements the Knuth-Plass line-breaking algorithm in Python.

Using the Knuth-Plass algorithm, one can break up a paragraph into lines in
    such a way that the paragraph as a whole has "minimum badness" (the fewest
    total demerits) as defined by the algorithm. It also figures out how much
    each line's glue must stretch or shrink if you want to "FULL" A.K.A.
    "LEFT-RIGHT" justify the text.

The paragraph is a list of Glue, Box, and Penalty specs (see
    `linebreak_specs`) ending in a mandatory break. The algorithm walks over
    it once. At every legal breakpoint b it looks at all the "active" nodes
    (earlier breakpoints that a line ending at b could still start after),
    computes how badly the line from each of them to b would have to be
    stretched or shrunk, and remembers, per fitness class, the node that gets
    to b with the fewest total demerits. Those become new active nodes. Nodes
    that can never start a line that fits again (the line to b is already
    overfull) are dropped from the active list.

Configuration (KnuthPlassConfig), named after the paper's parameters:
    flagged_demerit : (alpha) added when two lines in a row end at flagged
        penalties (hyphens). Defaults to 100.
    fitness_demerit : (gamma) added when two lines in a row are more than one
        fitness class apart. Defaults to 100.
    threshold : (rho) the maximum adjustment ratio allowed for a line.
        Defaults to 1.
    looseness : (q) an integer. If it's positive, the paragraph is set in that
        many lines more than the optimum if possible (or as close to it as
        possible), if it's negative in that many lines fewer. Defaults to
        zero, meaning the optimal number of lines.
    num : the numeric capability (see `linebreak_num`). Defaults to FLOAT.

If no set of breakpoints meets the criteria, the layout returns an empty list.
    Raise the threshold, or widen the lines, and try again.
"""
import logging
from collections import namedtuple
from typing import List, Sequence

from linebreak_num import FLOAT
from linebreak_specs import (Line, ParagraphLayout, Spec, adjustment_ratio,
        check_paragraph_end, first_uniform_line, is_legal_breakpoint,
        is_mandatory_break, line_width_for, line_widths, penalty_cost,
        penalty_flag, totals_after)
from linebreak_tools import profile

logger = logging.getLogger(__name__)

KnuthPlassConfig = namedtuple('KnuthPlassConfig',
        ['flagged_demerit', 'fitness_demerit', 'threshold', 'looseness', 'num'],
        defaults=[None, None, None, 0, FLOAT])

# Fitness classes
TIGHT, DECENT, LOOSE, VERY_LOOSE = 0, 1, 2, 3
FITNESS_CLASSES = (TIGHT, DECENT, LOOSE, VERY_LOOSE)

# =============================================================================
# Nodes
# -----------------------------------------------------------------------------

class Node:
    """
    A feasible breakpoint. Nodes live in the arena (a list) of one layout run
        and refer to each other by their index in it.
    """
    __slots__ = ["position", "line", "fitness", "total_width", "total_stretch", "total_shrink",
            "total_demerits", "previous", "link"]
    def __init__(self, position:int, line:int, fitness:int, total_width, total_stretch, total_shrink,
            total_demerits, previous:int=None, link:int=None):
        self.position       = position       # Index in the paragraph this break occurs at
        self.line           = line           # The number of the line that ends at this break
        self.fitness        = fitness        # The fitness class of that line

        # The running totals after this break (where the next line starts)
        self.total_width    = total_width
        self.total_stretch  = total_stretch
        self.total_shrink   = total_shrink

        self.total_demerits = total_demerits # Minimum total demerits up to this break

        self.previous       = previous       # Arena index of the best node for the preceding break
        self.link           = link           # Arena index of the next active node

    def __repr__(self):
        return f"<{self.__class__.__name__}(pos={self.position}, line={self.line}, fitness={self.fitness}, " \
                f"total_demerits={self.total_demerits}, previous={self.previous}, link={self.link})>"

# =============================================================================
# The Actual Knuth-Plass Algorithm
# -----------------------------------------------------------------------------

class KnuthPlassRun:
    """
    The state of one Knuth-Plass layout: the configuration, the running
        totals, the arena of nodes and the head of the active list. A run is
        created for every call of `KnuthPlass.layout_paragraph()` and thrown
        away, arena and all, when it returns.
    """
    def __init__(self, paragraph:Sequence[Spec], widths:List, config:KnuthPlassConfig):
        self.paragraph       = paragraph
        self.widths          = widths

        self.flagged_demerit = config.flagged_demerit
        self.fitness_demerit = config.fitness_demerit
        self.threshold       = config.threshold
        self.looseness       = config.looseness
        self.num = num       = config.num

        # Active nodes whose lines end before j0 have to be kept apart by line
        # number. Looseness needs every line number kept apart.
        self.j0 = float('inf') if self.looseness != 0 else first_uniform_line(widths)

        self.nodes:List[Node] = []
        self.active = None # Arena index of the first active node

        # The running totals of the paragraph up to the current item
        self.total_width = self.total_stretch = self.total_shrink = num.zero

        self.minus_one = num.of(-1)
        self.one       = num.of(1)
        self.hundred   = num.of(100)
        self.half      = num.rat(1, 2)
        self.minus_half = num.rat(-1, 2)

    def new_node(self, *args, **kwargs) -> int:
        self.nodes.append(Node(*args, **kwargs))
        return len(self.nodes) - 1

    def adjustment_ratio(self, a:Node, b:int):
        """
        Calculates the line number and adjustment ratio for a line from the
            node a to the breakpoint b.
        """
        j = a.line + 1
        r = adjustment_ratio(self.paragraph[b],
                self.total_width - a.total_width,
                self.total_stretch - a.total_stretch,
                self.total_shrink - a.total_shrink,
                line_width_for(self.widths, j), self.num)
        return j, r

    def demerits_and_fitness(self, r, a:Node, b:int):
        """
        Calculates the total demerits of breaking at b after node a and the
            fitness class of the line from a to b.
        """
        num = self.num
        spec = self.paragraph[b]
        cost = penalty_cost(spec, num)

        badness = self.one + self.hundred * num.powi(num.abs(r), 3)
        if cost >= num.zero:
            d = num.powi(badness + cost, 2)
        elif cost != num.NEG_INFINITY:
            d = num.powi(badness, 2) - num.powi(cost, 2)
        else:
            d = num.powi(badness, 2)

        # Only add the flagged demerit if both this line break and the last one
        # are flagged (they both are breaks that cause a hyphen)
        if a.previous is not None:
            d = d + self.flagged_demerit * penalty_flag(spec, num) * penalty_flag(self.paragraph[a.position], num)

        if   r < self.minus_half: c = TIGHT
        elif r <= self.half:      c = DECENT
        elif r <= self.one:       c = LOOSE
        else:                     c = VERY_LOOSE

        # A very loose line right after a tight one (or vice versa)
        if abs(c - a.fitness) > 1:
            d = d + self.fitness_demerit

        return d + a.total_demerits, c

    def layout_breakpoint(self, b:int) -> bool:
        """
        The main loop of the algorithm, run for every legal breakpoint b.
            Returns False if no active nodes are left.
        """
        nodes = self.nodes
        num = self.num
        infinity = num.INFINITY
        mandatory = is_mandatory_break(self.paragraph[b], num)

        a = self.active
        prev_a = None
        while a is not None:
            # Lowest demerits (and the node they come from) per fitness class
            class_a = [None, None, None, None]
            class_demerits = [infinity, infinity, infinity, infinity]
            min_demerits = infinity

            while True:
                node = nodes[a]
                next_a = node.link

                j, r = self.adjustment_ratio(node, b)
                if r < self.minus_one or mandatory:
                    # Deactivate node a
                    if prev_a is None: self.active = next_a
                    else:              nodes[prev_a].link = next_a
                else:
                    prev_a = a

                if self.minus_one <= r <= self.threshold:
                    d, c = self.demerits_and_fitness(r, node, b)
                    if d < class_demerits[c]:
                        class_demerits[c] = d
                        class_a[c] = a
                        if d < min_demerits:
                            min_demerits = d

                a = next_a
                if a is None:
                    break
                if nodes[a].line >= j and j < self.j0:
                    # The rest of the active nodes start lines of another length
                    break

            if min_demerits < infinity:
                # Insert new active nodes for the breaks from class_a to b
                tw, ty, tz = totals_after(self.paragraph, b,
                        self.total_width, self.total_stretch, self.total_shrink, num)
                limit = min_demerits + self.fitness_demerit

                for c in FITNESS_CLASSES:
                    if class_a[c] is not None and class_demerits[c] <= limit:
                        s = self.new_node(position=b, line=nodes[class_a[c]].line + 1, fitness=c,
                                total_width=tw, total_stretch=ty, total_shrink=tz,
                                total_demerits=class_demerits[c], previous=class_a[c], link=a)
                        if prev_a is None: self.active = s
                        else:              nodes[prev_a].link = s
                        prev_a = s

        return self.active is not None

    def iter_active(self):
        a = self.active
        while a is not None:
            yield self.nodes[a]
            a = self.nodes[a].link

    def choose_node(self) -> Node:
        """
        Chooses the active node with the fewest total demerits or, if the
            looseness is not 0, the one whose line count is as close as
            possible to the optimum plus the looseness.
        """
        best = None
        for node in self.iter_active():
            if best is None or node.total_demerits < best.total_demerits:
                best = node

        q = self.looseness
        if q != 0:
            k = best.line
            s = 0
            d = best.total_demerits
            for node in self.iter_active():
                delta = node.line - k

                # The two branches are for positive and negative looseness
                if q <= delta < s or s < delta <= q:
                    s = delta
                    d = node.total_demerits
                    best = node
                elif delta == s and node.total_demerits < d:
                    d = node.total_demerits
                    best = node

            logger.debug('Knuth-Plass: looseness %d gives %d lines instead of %d', q, best.line, k)

        return best

    def lines_for(self, node:Node) -> List[Line]:
        """
        Walks back from the chosen node to the start of the paragraph and
            returns the lines it ends, recomputing each line's adjustment ratio
            from the totals at its two breakpoints.
        """
        chain = []
        while node.previous is not None:
            chain.append(node)
            node = self.nodes[node.previous]
        chain.reverse()

        # The running totals up to each chosen breakpoint
        positions = set(n.position for n in chain)
        totals_at = {}
        num = self.num
        width = stretch = shrink = num.zero
        for i, spec in enumerate(self.paragraph):
            if i in positions:
                totals_at[i] = (width, stretch, shrink)
            w, y, z, _ = is_legal_breakpoint(spec, None, num)
            width, stretch, shrink = width + w, stretch + y, shrink + z

        lines = []
        for j, n in enumerate(chain, 1):
            prev = self.nodes[n.previous]
            width, stretch, shrink = totals_at[n.position]
            r = adjustment_ratio(self.paragraph[n.position],
                    width - prev.total_width,
                    stretch - prev.total_stretch,
                    shrink - prev.total_shrink,
                    line_width_for(self.widths, j), num)
            lines.append(Line(n.position, r))
        return lines

    def run(self) -> List[Line]:
        num = self.num
        zero = num.zero

        # Create an active node representing the beginning of the paragraph
        self.active = self.new_node(position=0, line=0, fitness=DECENT,
                total_width=zero, total_stretch=zero, total_shrink=zero, total_demerits=zero)

        paragraph = self.paragraph
        for b, spec in enumerate(paragraph):
            w, y, z, legal = is_legal_breakpoint(spec, paragraph[b - 1] if b > 0 else None, num)

            if legal and not self.layout_breakpoint(b):
                logger.debug('Knuth-Plass: no feasible breakpoints left at item %d', b)
                return []

            self.total_width   = self.total_width   + w
            self.total_stretch = self.total_stretch + y
            self.total_shrink  = self.total_shrink  + z

        node = self.choose_node()
        if node.previous is None:
            # Only the start of the paragraph is left, there was nowhere to break
            logger.debug('Knuth-Plass: the paragraph has no feasible breakpoints')
            return []

        lines = self.lines_for(node)
        logger.debug('Knuth-Plass: %d items laid out in %d lines with %s demerits (%d nodes)',
                len(paragraph), len(lines), node.total_demerits, len(self.nodes))
        return lines


class KnuthPlass(ParagraphLayout):
    def __init__(self, config:KnuthPlassConfig=None, **options):
        """
        Takes either a KnuthPlassConfig or its fields as keyword arguments.
        """
        if config is None:
            config = KnuthPlassConfig(**options)
        elif options:
            config = config._replace(**options)

        if isinstance(config.looseness, bool) or not isinstance(config.looseness, int):
            raise ValueError(f'The looseness must be an integer, not {config.looseness!r}')

        num = config.num
        def value(v, default):
            return num.of(default) if v is None else num.coerce(v)

        self.config = config._replace(
                flagged_demerit=value(config.flagged_demerit, 100),
                fitness_demerit=value(config.fitness_demerit, 100),
                threshold=value(config.threshold, 1))

    @profile()
    def layout_paragraph(self, paragraph:Sequence[Spec], line_width) -> List[Line]:
        """
        Breaks the given paragraph into lines of the given width (or widths,
            see `linebreak_specs.line_widths`) so that the total demerits are
            as low as possible. Returns an empty list if it cannot be done with
            this configuration.
        """
        widths = line_widths(line_width, self.config.num)

        if len(paragraph) == 0:
            return []
        check_paragraph_end(paragraph, self.config.num, logger)

        return KnuthPlassRun(paragraph, widths, self.config).run()


def knuth_plass_breaks(paragraph:Sequence[Spec], line_width, **options) -> List[Line]:
    """
    Runs the Knuth-Plass algorithm once with the given options (the fields of
        KnuthPlassConfig).
    """
    return KnuthPlass(**options).layout_paragraph(paragraph, line_width)
