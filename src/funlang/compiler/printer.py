"""
Assembly Printer
================

Renders a Blob as an assembly-like text listing: one label line per bound
label, then one indented mnemonic line per instruction.

Output Format
-------------
    main:
    	movq $1, %0
    	movq %0, %1
    	movq $2, %0
    	addq %1, %0
    	ret

Operands are written ``source, destination`` in the same order as the
Instr fields. Stack slots are rendered as negative offsets from the frame
register, one machine word per slot: slot 0 is ``-8(%bp)``, slot 1 is
``-16(%bp)``.

A label bound to the instruction count (the end of the stream) is printed
after the last instruction. Several labels bound to the same index are
printed in binding order.
"""

from funlang.compiler.ast import Op
from funlang.compiler import instructions as ins
from funlang.compiler.instructions import Blob, Imm, Reg, RegDeref, Stack, Label


BINOP_MNEMONICS = {
    Op.ADD: "addq",
    Op.SUB: "subq",
    Op.MUL: "mulq",
    Op.DIV: "divq",
}

UNOP_MNEMONICS = {
    Op.SUB: "negq",
}


class AssemblyPrinter:
    """
    Formats instructions and operands as mnemonic text.

    Attributes:
        slot_size: Bytes per stack slot
        frame_register: Name of the register stack slots are addressed from
        indent: Prefix for instruction lines
    """

    def __init__(self, slot_size: int = 8, frame_register: str = "bp", indent: str = "\t"):
        self.slot_size = slot_size
        self.frame_register = frame_register
        self.indent = indent

    def render(self, blob: Blob) -> list[str]:
        """
        Render a Blob as text lines.

        Raises:
            UnresolvedLabelError: If an instruction references an unbound label
        """
        blob.check_labels()

        labels_by_index: dict[int, list[str]] = {}
        for name, index in blob.labels.items():
            labels_by_index.setdefault(index, []).append(name)

        lines = []
        for index, instr in enumerate(blob.instructions):
            for name in labels_by_index.get(index, ()):
                lines.append(f"{name}:")
            lines.append(f"{self.indent}{self.format_instruction(instr)}")

        # Labels bound past the last instruction
        for index in sorted(i for i in labels_by_index if i >= len(blob.instructions)):
            for name in labels_by_index[index]:
                lines.append(f"{name}:")

        return lines

    def format_instruction(self, instr: ins.Instr) -> str:
        """Format one instruction as 'mnemonic operand, operand'."""
        if isinstance(instr, ins.BinOp):
            return self._format(BINOP_MNEMONICS[instr.op], instr.lhs, instr.rhs)
        if isinstance(instr, ins.UnOp):
            mnemonic = UNOP_MNEMONICS.get(instr.op)
            if mnemonic is None:
                raise ValueError(f"no mnemonic for unary {instr.op.name}")
            return self._format(mnemonic, instr.operand)
        if isinstance(instr, ins.Mov):
            return self._format("movq", instr.src, instr.dst)
        if isinstance(instr, ins.Cmp):
            return self._format("cmp", instr.a, instr.b)
        if isinstance(instr, ins.Jmp):
            return self._format("jmp", instr.target)
        if isinstance(instr, ins.Jez):
            return self._format("jez", instr.target)
        if isinstance(instr, ins.Call):
            return self._format("call", instr.target)
        if isinstance(instr, ins.Ret):
            return "ret"
        raise TypeError(f"not an instruction: {instr!r}")

    def format_operand(self, loc: ins.Loc) -> str:
        """Format one operand location."""
        if isinstance(loc, Imm):
            return f"${loc.value}"
        if isinstance(loc, Reg):
            return f"%{loc.index}"
        if isinstance(loc, RegDeref):
            return f"(%{loc.index})"
        if isinstance(loc, Stack):
            offset = (loc.slot + 1) * self.slot_size
            return f"-{offset}(%{self.frame_register})"
        if isinstance(loc, Label):
            return loc.name
        raise TypeError(f"not an operand location: {loc!r}")

    def _format(self, mnemonic: str, *locs: ins.Loc) -> str:
        return f"{mnemonic} {', '.join(self.format_operand(loc) for loc in locs)}"


def render(blob: Blob, **options) -> list[str]:
    """Render a Blob as text lines with a default-configured printer."""
    return AssemblyPrinter(**options).render(blob)
