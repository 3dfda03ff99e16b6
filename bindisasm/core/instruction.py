"""
Decoded instruction records handed over by the decode engine.

Register identifiers, opcode identifiers and group identifiers are the
engine's own numeric ids. Register id 0 means "no register".
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Tuple


class OperandKind(IntEnum):
    """Operand kinds, numbered like the engine's CS_OP_* constants"""

    OTHER = 0
    REGISTER = 1
    IMMEDIATE = 2
    MEMORY = 3


NO_REGISTER = 0


@dataclass(frozen=True)
class MemoryRef:
    base: int = NO_REGISTER
    index: int = NO_REGISTER
    disp: int = 0


@dataclass(frozen=True)
class Operand:
    kind: OperandKind
    size: int = 0  # bytes, 0 when the engine does not report it
    reg: int = NO_REGISTER
    imm: int = 0
    mem: MemoryRef = field(default_factory=MemoryRef)

    @property
    def has_base(self) -> bool:
        return self.mem.base != NO_REGISTER


@dataclass(frozen=True)
class OperandDetail:
    operands: Tuple[Operand, ...] = ()
    groups: Tuple[int, ...] = ()

    @property
    def op_count(self) -> int:
        return len(self.operands)


@dataclass(frozen=True)
class Instruction:
    id: int
    address: int
    size: int
    mnemonic: str = ""
    op_str: str = ""
    raw: bytes = b""

    @property
    def text(self) -> str:
        if self.op_str:
            return f"{self.mnemonic} {self.op_str}"
        return self.mnemonic
