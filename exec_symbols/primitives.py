"""Encoding primitives — truth values, pairs, sequences and numerals.

These are the building blocks every other layer is written against:

  Truth     TRUE / FALSE and the selectors IF, AND, OR, NOT
  Pair      an immutable 2-tuple with fst / snd projections
  Sequence  a persistent singly-linked list (Cons cells ending in NIL)
  Numeral   a non-negative integer with truncated subtraction

Sequences are finite and never mutated: ``cons`` shares its tail, and every
operation (``fold``, ``map_seq``, ``append``, ``reorder``) returns a new
sequence. All operations here are total over their accepted domains — none
of them raise for non-negative numerals and finite sequences.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator


# ---------------------------------------------------------------------------
# Truth values
# ---------------------------------------------------------------------------

TRUE = True
FALSE = False


def IDENTITY(x: Any) -> Any:
    return x


def IF(condition: Any, on_true: Any, on_false: Any) -> Any:
    """Select ``on_true`` when the condition holds, otherwise ``on_false``.

    The payloads are returned untouched, so they may be of any type
    (including callables and sequences).
    """
    if condition:
        return on_true
    return on_false


def AND(p: Any, q: Any) -> bool:
    return IF(p, bool(q), FALSE)


def OR(p: Any, q: Any) -> bool:
    return IF(p, TRUE, bool(q))


def NOT(p: Any) -> bool:
    return IF(p, FALSE, TRUE)


# ---------------------------------------------------------------------------
# Pairs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Pair:
    """An immutable 2-tuple."""
    first: Any
    second: Any

    def __iter__(self) -> Iterator[Any]:
        yield self.first
        yield self.second


def pair(a: Any, b: Any) -> Pair:
    return Pair(a, b)


def fst(p: Pair) -> Any:
    return p.first


def snd(p: Pair) -> Any:
    return p.second


# ---------------------------------------------------------------------------
# Sequences: NIL and Cons
# ---------------------------------------------------------------------------

class _NilType:
    """The unique empty sequence.

    Also returned by ``nth`` and ``reorder`` for positions past the end of a
    sequence, so callers check for it explicitly rather than catching errors.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "nil"

    def __bool__(self) -> bool:
        return False

    def __iter__(self) -> Iterator[Any]:
        return iter(())

    def __len__(self) -> int:
        return 0

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _NilType)

    def __hash__(self) -> int:
        return hash("nil")


NIL = _NilType()
nil = NIL


@dataclass(frozen=True, eq=False, repr=False)
class Cons:
    """A non-empty sequence cell: ``head`` followed by the ``tail`` sequence.

    Equality is element-wise, so two sequences built separately from equal
    elements compare equal. Iteration walks the cells without recursion.
    """
    head: Any
    tail: Cons | _NilType = NIL

    def __iter__(self) -> Iterator[Any]:
        node: Cons | _NilType = self
        while isinstance(node, Cons):
            yield node.head
            node = node.tail

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cons):
            return NotImplemented
        return list(self) == list(other)

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __repr__(self) -> str:
        return f"seq({', '.join(repr(item) for item in self)})"


Seq = Cons | _NilType


def cons(head: Any, tail: Seq = NIL) -> Cons:
    """Prepend ``head`` to ``tail``. The tail is shared, never copied."""
    return Cons(head, tail)


def seq(*items: Any) -> Seq:
    """Build a sequence from the arguments, first argument at the head."""
    result: Seq = NIL
    for item in reversed(items):
        result = Cons(item, result)
    return result


def from_iterable(items: Iterable[Any]) -> Seq:
    if isinstance(items, (Cons, _NilType)):
        return items
    return seq(*items)


def to_list(s: Iterable[Any]) -> list[Any]:
    return list(s)


def ISEMPTY(s: Any) -> bool:
    return not isinstance(s, Cons)


def head(s: Seq) -> Any:
    return IF(ISEMPTY(s), NIL, getattr(s, "head", NIL))


def tail(s: Seq) -> Seq:
    return IF(ISEMPTY(s), NIL, getattr(s, "tail", NIL))


# ---------------------------------------------------------------------------
# Sequence operations
# ---------------------------------------------------------------------------

def fold(f: Callable[[Any, Any], Any], acc: Any, s: Iterable[Any]) -> Any:
    """Right fold: ``fold(f, acc, seq(a, b, c)) == f(a, f(b, f(c, acc)))``.

    ``f`` receives (element, accumulated result of the rest).
    """
    for item in reversed(to_list(s)):
        acc = f(item, acc)
    return acc


def fold_left(f: Callable[[Any, Any], Any], acc: Any, s: Iterable[Any]) -> Any:
    """Left fold: ``fold_left(f, acc, seq(a, b, c)) == f(f(f(acc, a), b), c)``.

    Visits the elements earliest first; ``f`` receives (accumulator, element).
    """
    for item in s:
        acc = f(acc, item)
    return acc


def map_seq(f: Callable[[Any], Any], s: Iterable[Any]) -> Seq:
    return fold(lambda item, rest: cons(f(item), rest), NIL, s)


def append(s1: Iterable[Any], s2: Seq) -> Seq:
    """Concatenate two sequences; ``s2`` becomes the shared tail."""
    return fold(cons, s2, s1)


def length(s: Iterable[Any]) -> int:
    return fold(lambda _item, n: SUCC(n), ZERO, s)


def nth(n: int, s: Iterable[Any]) -> Any:
    """Return the element at position ``n`` (zero-based), or NIL past the end."""
    index = ZERO
    for item in s:
        if EQ(index, n):
            return item
        index = SUCC(index)
    return NIL


def reorder(nouns: Iterable[Any], order: Iterable[int]) -> Seq:
    """Permute ``nouns`` by the role positions in ``order``.

    ``reorder(seq(alice, bob), seq(1, 0)) == seq(bob, alice)``. Positions past
    the end of ``nouns`` produce NIL in the result.
    """
    nouns = to_list(nouns)
    return map_seq(lambda i: nth(i, nouns), order)


# ---------------------------------------------------------------------------
# Numerals
# ---------------------------------------------------------------------------

ZERO = 0


def UINT(n: int) -> int:
    """Convert a host integer to a numeral; negative inputs clamp to ZERO."""
    return IF(n < 0, ZERO, int(n))


def SUCC(n: int) -> int:
    return n + 1


def PRED(n: int) -> int:
    return IF(ISZERO(n), ZERO, n - 1)


def ADD(m: int, n: int) -> int:
    return m + n


def MULT(m: int, n: int) -> int:
    return m * n


def EXP(m: int, n: int) -> int:
    return m ** n


def SUB(m: int, n: int) -> int:
    """Truncated subtraction: never goes below ZERO."""
    return IF(n >= m, ZERO, m - n)


def ISZERO(n: int) -> bool:
    return n == ZERO


def LE(m: int, n: int) -> bool:
    return ISZERO(SUB(m, n))


def GE(m: int, n: int) -> bool:
    return ISZERO(SUB(n, m))


def LT(m: int, n: int) -> bool:
    return NOT(GE(m, n))


def GT(m: int, n: int) -> bool:
    return NOT(LE(m, n))


def EQ(m: int, n: int) -> bool:
    return AND(LE(m, n), LE(n, m))
