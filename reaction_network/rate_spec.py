"""Rate specifications for reactions.

A rate is one of
    Numeric(value)                    constant rate
    Symbolic(expr)                    sympy expression in species and parameters
    ReversiblePair(forward, backward) two rates for a reversible reaction
Rates are stored and compared structurally; they are never evaluated here.
"""

from reaction_network.errors import MalformedRateError  # type: ignore

from dataclasses import dataclass
import numbers
from tokenize import TokenError
import sympy as sp  # type: ignore
from sympy.parsing.sympy_parser import convert_xor, standard_transformations  # type: ignore
from typing import Any, Dict, FrozenSet, Optional, Union

# "^" is exponentiation in rate strings
TRANSFORMATIONS = standard_transformations + (convert_xor,)
# Functions a rate string may call. Any other name is parsed as a symbol,
# so undeclared names such as E, I or pi are reported rather than replaced
# by sympy constants.
RATE_FUNCTION_DCT = {
    "exp": sp.exp,
    "log": sp.log,
    "ln": sp.log,
    "log10": lambda x: sp.log(x, 10),
    "sqrt": sp.sqrt,
    "pow": sp.Pow,
    "abs": sp.Abs,
    "Abs": sp.Abs,
    "min": sp.Min,
    "max": sp.Max,
    "floor": sp.floor,
    "ceiling": sp.ceiling,
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "tanh": sp.tanh,
    }
# Names referenced by the code that the parser transformations generate
_PARSER_DCT = {
    "Symbol": sp.Symbol,
    "Function": sp.Function,
    "Integer": sp.Integer,
    "Float": sp.Float,
    "Rational": sp.Rational,
    "factorial": sp.factorial,
    "factorial2": sp.factorial2,
    }


class RateSpec(object):
    """Base class for rate specifications."""

    @property
    def free_names(self) -> FrozenSet[str]:
        raise NotImplementedError

    def toExpr(self) -> sp.Expr:
        raise NotImplementedError


@dataclass(frozen=True)
class Numeric(RateSpec):
    value: float

    @property
    def free_names(self) -> FrozenSet[str]:
        return frozenset()

    def toExpr(self) -> sp.Expr:
        return sp.sympify(self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Symbolic(RateSpec):
    expr: sp.Expr

    @property
    def free_names(self) -> FrozenSet[str]:
        return frozenset(str(s) for s in self.expr.free_symbols)

    def toExpr(self) -> sp.Expr:
        return self.expr

    def __str__(self) -> str:
        return str(self.expr)


@dataclass(frozen=True)
class ReversiblePair(RateSpec):
    forward: Union[Numeric, Symbolic]
    backward: Union[Numeric, Symbolic]

    @property
    def free_names(self) -> FrozenSet[str]:
        return self.forward.free_names | self.backward.free_names

    def toExpr(self) -> sp.Expr:
        raise MalformedRateError("A reversible pair has no single rate expression",
                context={"rate": str(self)})

    def __str__(self) -> str:
        return f"({self.forward}, {self.backward})"


def makeRateSpec(rate: Any, symbol_dct: Optional[Dict[str, sp.Symbol]] = None) -> RateSpec:
    """Converts a user supplied rate into a RateSpec.

    Args:
        rate: number, str, sympy expression, 2-tuple of these, or a RateSpec
        symbol_dct (dict): name -> sympy.Symbol used when parsing strings

    Returns:
        RateSpec

    Raises:
        MalformedRateError
    """
    if symbol_dct is None:
        symbol_dct = {}
    if isinstance(rate, RateSpec):
        return rate
    if isinstance(rate, (tuple, list)):
        if len(rate) != 2:
            raise MalformedRateError(
                f"A reversible rate needs exactly 2 entries, not {len(rate)}",
                context={"rate": rate})
        forward = makeRateSpec(rate[0], symbol_dct)
        backward = makeRateSpec(rate[1], symbol_dct)
        if isinstance(forward, ReversiblePair) or isinstance(backward, ReversiblePair):
            raise MalformedRateError("Reversible rates cannot be nested",
                    context={"rate": rate})
        return ReversiblePair(forward=forward, backward=backward)  # type: ignore
    return _makeSingleRate(rate, symbol_dct)


def _makeSingleRate(rate: Any, symbol_dct: Dict[str, sp.Symbol]) -> Union[Numeric, Symbolic]:
    if isinstance(rate, bool):
        raise MalformedRateError(f"Invalid rate: {rate!r}", context={"rate": rate})
    if isinstance(rate, numbers.Real):
        return Numeric(rate)
    if isinstance(rate, str):
        try:
            global_dct = dict(_PARSER_DCT)
            global_dct.update(RATE_FUNCTION_DCT)
            rate = sp.parse_expr(rate, local_dict=dict(symbol_dct), global_dict=global_dct,
                    transformations=TRANSFORMATIONS)
        except (SyntaxError, TypeError, ValueError, TokenError, sp.SympifyError) as exc:
            raise MalformedRateError(f"Cannot parse rate {rate!r}: {exc}",
                    context={"rate": rate}) from exc
    if not isinstance(rate, sp.Basic):
        raise MalformedRateError(f"Invalid rate type: {type(rate).__name__}",
                context={"rate": rate})
    if rate.is_number:
        if not rate.is_real:
            raise MalformedRateError(f"Rate must be real: {rate}", context={"rate": rate})
        if rate.is_Integer:
            return Numeric(int(rate))
        return Numeric(float(rate))
    return Symbolic(rate)
