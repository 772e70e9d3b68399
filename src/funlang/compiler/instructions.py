"""
Abstract Register Machine Instructions
======================================

This module defines the instruction set emitted by the code generator and
the Blob container that carries a finished instruction stream.

Operand Locations (Loc)
-----------------------
| Loc       | Meaning                         | Printed as      |
|-----------|---------------------------------|-----------------|
| Imm       | Immediate integer               | $5              |
| Reg       | Register by index               | %0              |
| RegDeref  | Memory addressed by a register  | (%0)            |
| Stack     | Local variable slot             | -8(%bp)         |
| Label     | Symbolic jump/call target       | main            |

Instructions (Instr)
--------------------
| Instr  | Operands        | Effect                                    |
|--------|-----------------|-------------------------------------------|
| BinOp  | lhs, op, rhs    | rhs = lhs op rhs                          |
| UnOp   | op, operand     | operand = op operand (SUB negates)        |
| Mov    | src, dst        | dst = src                                 |
| Cmp    | a, b            | set the zero flag from b - a              |
| Jmp    | target          | jump                                      |
| Jez    | target          | jump if the last comparison gave zero     |
| Call   | target          | call subroutine                           |
| Ret    |                 | return; the result is in register 0       |

BinOp operands are in source order and the result overwrites the second
operand. ``BinOp(Reg(1), Op.SUB, Reg(0))`` leaves ``r1 - r0`` in r0.

Labels are symbolic. A Blob maps each label name to the instruction index
it marks; an index equal to the instruction count marks the end of the
stream. Labels are never resolved to numeric addresses here.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from funlang.compiler.ast import Op
from funlang.compiler.errors import DuplicateLabelError, UnresolvedLabelError


# =============================================================================
# Operand Locations
# =============================================================================

@dataclass(frozen=True)
class Imm:
    """Immediate integer operand."""
    value: int


@dataclass(frozen=True)
class Reg:
    """Register operand."""
    index: int


@dataclass(frozen=True)
class RegDeref:
    """Memory operand addressed by a register."""
    index: int


@dataclass(frozen=True)
class Stack:
    """Local variable storage, by logical slot number."""
    slot: int


@dataclass(frozen=True)
class Label:
    """Symbolic jump or call target."""
    name: str


Loc = Union[Imm, Reg, RegDeref, Stack, Label]


# =============================================================================
# Instructions
# =============================================================================

@dataclass(frozen=True)
class BinOp:
    lhs: Loc
    op: Op
    rhs: Loc


@dataclass(frozen=True)
class UnOp:
    op: Op
    operand: Loc


@dataclass(frozen=True)
class Mov:
    src: Loc
    dst: Loc


@dataclass(frozen=True)
class Cmp:
    a: Loc
    b: Loc


@dataclass(frozen=True)
class Jmp:
    target: Loc


@dataclass(frozen=True)
class Jez:
    target: Loc


@dataclass(frozen=True)
class Call:
    target: Loc


@dataclass(frozen=True)
class Ret:
    pass


Instr = Union[BinOp, UnOp, Mov, Cmp, Jmp, Jez, Call, Ret]


def operands(instr: Instr) -> tuple:
    """Return the Loc operands of an instruction, in order."""
    if isinstance(instr, BinOp):
        return (instr.lhs, instr.rhs)
    if isinstance(instr, UnOp):
        return (instr.operand,)
    if isinstance(instr, Mov):
        return (instr.src, instr.dst)
    if isinstance(instr, Cmp):
        return (instr.a, instr.b)
    if isinstance(instr, (Jmp, Jez, Call)):
        return (instr.target,)
    return ()


def referenced_labels(instructions) -> list[str]:
    """Label names referenced by operands, in first-use order, no repeats."""
    seen: dict[str, None] = {}
    for instr in instructions:
        for loc in operands(instr):
            if isinstance(loc, Label):
                seen.setdefault(loc.name)
    return list(seen)


# =============================================================================
# Blob
# =============================================================================

@dataclass(frozen=True)
class Blob:
    """
    A finished instruction stream.

    Attributes:
        instructions: The instructions, in program order
        labels: Label name -> instruction index, in binding order
        variables: Variable name -> stack slot, in allocation order
    """
    instructions: tuple = ()
    labels: dict[str, int] = field(default_factory=dict)
    variables: dict[str, int] = field(default_factory=dict)

    def labels_at(self, index: int) -> list[str]:
        """Names bound to an instruction index, in binding order."""
        return [name for name, bound in self.labels.items() if bound == index]

    def unresolved_labels(self) -> list[str]:
        """Labels referenced by instructions but missing from the label table."""
        return [
            name for name in referenced_labels(self.instructions)
            if name not in self.labels
        ]

    def check_labels(self) -> None:
        """
        Raise UnresolvedLabelError for the first referenced, unbound label.
        """
        unresolved = self.unresolved_labels()
        if unresolved:
            name = unresolved[0]
            raise UnresolvedLabelError(name, _find_similar_labels(name, self.labels))


# =============================================================================
# Blob Builder
# =============================================================================

class BlobBuilder:
    """
    Mutable state of one compilation: an append-only instruction list,
    a grow-only label table and a grow-only variable table.

    Usage:
        builder = BlobBuilder()
        builder.bind_label("main")
        builder.append(Mov(Imm(1), Reg(0)))
        builder.append(Ret())
        blob = builder.finalize()
    """

    def __init__(self, reserved_labels: Iterable[str] = ()):
        """
        Args:
            reserved_labels: Names new_label() must never return, typically
                             function names not bound yet
        """
        self._instructions: list[Instr] = []
        self._labels: dict[str, int] = {}
        self._variables: dict[str, int] = {}
        self._reserved_labels = set(reserved_labels)
        self._temp_label_counter = 0

    @property
    def position(self) -> int:
        """Index the next appended instruction will get."""
        return len(self._instructions)

    def append(self, instr: Instr) -> int:
        """Append an instruction and return its index."""
        self._instructions.append(instr)
        return len(self._instructions) - 1

    def new_label(self) -> str:
        """
        Mint a fresh temporary label name: _0, _1, ...

        Names already bound or reserved are skipped.
        """
        while True:
            name = f"_{self._temp_label_counter}"
            self._temp_label_counter += 1
            if name not in self._labels and name not in self._reserved_labels:
                return name

    def bind_label(self, name: str, index: Optional[int] = None) -> int:
        """
        Bind a label to an instruction index (default: the current end).

        Raises:
            DuplicateLabelError: If the label is already bound
        """
        if name in self._labels:
            raise DuplicateLabelError(name, self._labels[name])
        if index is None:
            index = self.position
        self._labels[name] = index
        return index

    def slot_for(self, name: str) -> int:
        """
        Stack slot of a variable, allocating the next free one on first use.
        """
        if name not in self._variables:
            self._variables[name] = len(self._variables)
        return self._variables[name]

    def finalize(self) -> Blob:
        """
        Freeze the builder's contents into a Blob.

        Raises:
            UnresolvedLabelError: If an instruction references an unbound label
        """
        blob = Blob(
            instructions=tuple(self._instructions),
            labels=dict(self._labels),
            variables=dict(self._variables),
        )
        blob.check_labels()
        return blob


# =============================================================================
# Label Hints
# =============================================================================

def _find_similar_labels(name: str, labels) -> list[str]:
    """
    Find bound labels with names close to an unresolved one.

    Uses a simple edit distance heuristic.
    """
    name_lower = name.lower()
    similar = []

    for label in labels:
        label_lower = label.lower()
        if (
            label_lower == name_lower or
            abs(len(label) - len(name)) <= 1 and
            _edit_distance(name_lower, label_lower) <= 2
        ):
            similar.append(label)

    return similar[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    distances = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        new_distances = [i + 1]
        for j, c2 in enumerate(s2):
            if c1 == c2:
                new_distances.append(distances[j])
            else:
                new_distances.append(1 + min(distances[j], distances[j + 1], new_distances[-1]))
        distances = new_distances
    return distances[-1]
