"""
Ordered table of decoded instructions and their operand details.
"""

from typing import Iterator, List, Optional, Tuple

from .arch import Arch, BitMode, MnemType
from .instruction import Instruction, OperandDetail


class InstructionTable:
    """
    Parallel lists of instructions and operand details, indexed from 0.

    The table also carries the architecture it was decoded for and the
    classifier chosen for that architecture, so read-only analyses can work
    from the table alone. Reads are not synchronized: callers must not read
    while the owner rebuilds the table.
    """

    def __init__(self, arch: Arch = Arch.INTEL, bit_mode: BitMode = BitMode.BITS_32, classifier=None):
        self.arch = arch
        self.bit_mode = bit_mode
        self.classifier = classifier
        self._insns: List[Instruction] = []
        self._details: List[OperandDetail] = []

    def configure(self, arch: Arch, bit_mode: BitMode, classifier) -> None:
        self.clear()
        self.arch = arch
        self.bit_mode = bit_mode
        self.classifier = classifier

    def clear(self) -> None:
        self._insns = []
        self._details = []

    def append(self, insn: Instruction, detail: OperandDetail) -> None:
        self._insns.append(insn)
        self._details.append(detail)

    def __len__(self) -> int:
        return len(self._insns)

    def __iter__(self) -> Iterator[Tuple[Instruction, OperandDetail]]:
        return iter(zip(self._insns, self._details))

    def in_range(self, index: int) -> bool:
        return 0 <= index < len(self._insns)

    def insn_at(self, index: int) -> Optional[Instruction]:
        if not self.in_range(index):
            return None
        return self._insns[index]

    def detail_at(self, index: int) -> Optional[OperandDetail]:
        if not self.in_range(index):
            return None
        return self._details[index]

    def mnem_type_at(self, index: int) -> MnemType:
        if not self.in_range(index) or self.classifier is None:
            return MnemType.INVALID
        return self.classifier.classify(self._insns[index], self._details[index])
