"""
Architecture, bit-width and instruction category definitions.
"""

from enum import Enum, IntEnum


class Arch(Enum):
    """Instruction set families the disassembler understands"""

    INTEL = "intel"
    ARM = "arm"


class BitMode(IntEnum):
    """Address width of the binary being disassembled"""

    BITS_16 = 16
    BITS_32 = 32
    BITS_64 = 64


class MnemType(Enum):
    """Semantic category of a decoded instruction"""

    INVALID = "invalid"
    JUMP = "jump"
    COND_JUMP = "conditional-jump"
    CALL = "call"
    RET = "return"
    MOV = "move"
    LOOP = "loop"
    PUSH = "push"
    POP = "pop"
    NOP = "nop"
    INT3 = "breakpoint-trap"
    INTX = "software-interrupt"
    OTHER = "other"


# Categories that transfer control to an address encoded in the instruction
BRANCHING_TYPES = frozenset(
    {MnemType.JUMP, MnemType.COND_JUMP, MnemType.CALL, MnemType.LOOP}
)
