"""
The number representations that the line-breaking algorithms can run on.

Both `first_fit` and `knuth_plass` never do arithmetic on plain Python
    literals. Instead, they ask an `Arithmetic` object (the "numeric
    capability") for the few constants they need (0, 1, -1, 100, 1/2, +/-
    infinity) and for `abs()` and integer powers. Everything else is done with
    the normal `+ - * /` and comparison operators on the values themselves.
    That way the same algorithm can run on:

    FLOAT:  Native Python floats. Infinity is `math.inf`.

    FixedArithmetic(I16F16) / FixedArithmetic(I32F32): Saturating
        fixed-point numbers. Instead of overflowing, every operation clamps
        the result to the smallest/largest representable value, and those two
        clamp values ARE the +/- infinity of the representation.

NOTE: The fixed-point "infinity" is only an approximation. `MAX` is a real,
    finite number, so `MAX - 1` is no longer "infinity" and `x == INFINITY`
    is an exact comparison against `MAX`, not a test for unboundedness. Costs
    and demerits large enough to saturate also become indistinguishable from
    each other, so pick a representation wide enough for your paragraphs
    (I16F16 saturates at 32768, which a single line's demerits can reach).
"""
import math
import numbers
from fractions import Fraction
from typing import Union

Num = Union[int, float, 'Fixed']

# =============================================================================
# Saturating Fixed-Point Numbers
# -----------------------------------------------------------------------------

class Fixed:
    """
    A signed fixed-point number stored as the integer `bits`, where the real
        value is `bits / 2**FRAC_BITS`. Use `fixed_type()` (or one of the
        ready-made I16F16, I32F32 classes) to get a concrete class; `Fixed`
        itself has no size.

    All arithmetic saturates: results are clamped to [MIN, MAX] instead of
        wrapping around. Multiplication and division round toward negative
        infinity. Dividing by zero gives MAX or MIN depending on the sign of
        the dividend (and 0 for 0 / 0).
    """
    __slots__ = ['bits']

    INT_BITS  = None # integer bits, including the sign bit
    FRAC_BITS = None # fractional bits
    MIN_BITS  = None
    MAX_BITS  = None
    MIN       = None # set by fixed_type()
    MAX       = None

    def __init__(self, bits:int):
        self.bits = bits

    @classmethod
    def from_bits(cls, bits:int):
        return cls(min(max(bits, cls.MIN_BITS), cls.MAX_BITS))

    @classmethod
    def from_num(cls, value):
        """
        Converts an int, float, Fraction or Fixed of any size into this
            fixed-point type, rounding to the nearest representable value and
            saturating at MIN/MAX. Float infinities (and the MIN/MAX of another
            fixed type) map onto this type's MIN/MAX.
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, Fixed):
            if value.bits == value.MAX_BITS: return cls.MAX
            if value.bits == value.MIN_BITS: return cls.MIN

            shift = cls.FRAC_BITS - value.FRAC_BITS
            if shift >= 0:
                return cls.from_bits(value.bits << shift)
            return cls.from_bits(value.bits >> -shift)

        if isinstance(value, float):
            if math.isnan(value):
                raise ValueError('NaN has no fixed-point representation')
            if math.isinf(value):
                return cls.MAX if value > 0 else cls.MIN
            value = Fraction(value)

        if isinstance(value, numbers.Rational):
            return cls.from_bits(round(Fraction(value) * (1 << cls.FRAC_BITS)))

        raise TypeError(f'Cannot convert {value!r} to {cls.__name__}')

    def to_float(self) -> float:
        return self.bits / (1 << self.FRAC_BITS)

    def to_fraction(self) -> Fraction:
        return Fraction(self.bits, 1 << self.FRAC_BITS)

    def _coerce(self, other):
        if isinstance(other, self.__class__):
            return other
        if isinstance(other, (Fixed, float, numbers.Rational)):
            return self.__class__.from_num(other)
        return None

    # -- Arithmetic

    def __add__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.from_bits(self.bits + other.bits)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.from_bits(self.bits - other.bits)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.from_bits(other.bits - self.bits)

    def __mul__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.from_bits((self.bits * other.bits) >> self.FRAC_BITS)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self._div(self, other)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self._div(other, self)

    @classmethod
    def _div(cls, a, b):
        if b.bits == 0:
            if a.bits > 0: return cls.MAX
            if a.bits < 0: return cls.MIN
            return cls(0)
        return cls.from_bits((a.bits << cls.FRAC_BITS) // b.bits)

    def __neg__(self):
        return self.from_bits(-self.bits)

    def __pos__(self):
        return self

    def __abs__(self):
        return self.from_bits(abs(self.bits))

    # -- Comparisons

    def __eq__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.bits == other.bits

    def __lt__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.bits < other.bits

    def __le__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.bits <= other.bits

    def __gt__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.bits > other.bits

    def __ge__(self, other):
        other = self._coerce(other)
        if other is None: return NotImplemented
        return self.bits >= other.bits

    def __hash__(self):
        # MAX and MIN compare equal to the float infinities
        if self.bits == self.MAX_BITS: return hash(math.inf)
        if self.bits == self.MIN_BITS: return hash(-math.inf)
        return hash(self.to_fraction())

    def __bool__(self):
        return self.bits != 0

    def __float__(self):
        return self.to_float()

    def __repr__(self):
        return f'{self.__class__.__name__}({self.to_float()!r})'


def fixed_type(int_bits:int, frac_bits:int, name:str=None):
    """
    Creates a concrete saturating fixed-point class with `int_bits` integer
        bits (including the sign bit) and `frac_bits` fractional bits, e.g.
        fixed_type(16, 16) gives numbers in [-32768, 32768) with a resolution
        of 1/65536.
    """
    if int_bits < 1 or frac_bits < 0:
        raise ValueError(f'Invalid fixed-point layout I{int_bits}F{frac_bits}')

    total = int_bits + frac_bits
    cls = type(name or f'I{int_bits}F{frac_bits}', (Fixed,), {
        '__slots__': (),
        'INT_BITS':  int_bits,
        'FRAC_BITS': frac_bits,
        'MIN_BITS':  -(1 << (total - 1)),
        'MAX_BITS':  (1 << (total - 1)) - 1,
    })
    cls.MIN = cls(cls.MIN_BITS)
    cls.MAX = cls(cls.MAX_BITS)
    return cls

I16F16 = fixed_type(16, 16)
I32F32 = fixed_type(32, 32)

# =============================================================================
# Numeric Capabilities
# -----------------------------------------------------------------------------

class Arithmetic:
    """
    The numeric capability the layouts are written against. Subclasses
        provide the constructors and the two infinity sentinels; the operators
        themselves come from the number type.
    """
    INFINITY     = None
    NEG_INFINITY = None

    @property
    def zero(self):
        return self.of(0)

    def of(self, n):
        """Returns the small integer (or float) `n` in this representation."""
        raise NotImplementedError

    def rat(self, num:int, denom:int):
        """Returns the rational number num/denom in this representation."""
        raise NotImplementedError

    def coerce(self, value):
        """
        Converts a plain Python number (or a number from another
            representation) into this one. +/- infinity map onto INFINITY and
            NEG_INFINITY.
        """
        raise NotImplementedError

    def abs(self, x):
        return abs(x)

    def powi(self, x, n:int):
        # Repeated multiplication, so an overflow saturates (fixed point) or
        # becomes inf (float) instead of raising OverflowError.
        result = self.of(1)
        for _ in range(n):
            result = result * x
        return result

    def is_infinite(self, x) -> bool:
        return x == self.INFINITY or x == self.NEG_INFINITY


class FloatArithmetic(Arithmetic):
    INFINITY     = math.inf
    NEG_INFINITY = -math.inf

    def of(self, n):
        return float(n)

    def rat(self, num, denom):
        return num / denom

    def coerce(self, value):
        if isinstance(value, Fixed):
            if value.bits == value.MAX_BITS: return math.inf
            if value.bits == value.MIN_BITS: return -math.inf
        return float(value)

    def abs(self, x):
        return math.fabs(x)

    def __repr__(self):
        return 'FLOAT'


class FixedArithmetic(Arithmetic):
    """
    Saturating fixed-point arithmetic. INFINITY and NEG_INFINITY are the
        MAX and MIN of the fixed-point type.
    """
    def __init__(self, fixed_cls=I16F16):
        self.fixed_cls    = fixed_cls
        self.INFINITY     = fixed_cls.MAX
        self.NEG_INFINITY = fixed_cls.MIN

    def of(self, n):
        return self.fixed_cls.from_num(n)

    def rat(self, num, denom):
        return self.fixed_cls.from_num(Fraction(num, denom))

    def coerce(self, value):
        return self.fixed_cls.from_num(value)

    def __repr__(self):
        return f'FixedArithmetic({self.fixed_cls.__name__})'

    def __eq__(self, other):
        return isinstance(other, FixedArithmetic) and other.fixed_cls is self.fixed_cls

    def __hash__(self):
        return hash(self.fixed_cls)

FLOAT = FloatArithmetic()
FIXED = FixedArithmetic(I16F16)
