"""
Decode-engine capability consumed by the decoder session.

Any backend that can open a handle for an (architecture, bit width) pair and
decode one instruction at a time can drive the disassembler.
"""

from typing import Optional, Protocol, Tuple

from ..core.arch import Arch, BitMode
from ..core.instruction import Instruction, OperandDetail

DecodeResult = Tuple[Instruction, OperandDetail]

# Longest encoding any supported architecture can produce (x86: 15 bytes)
MAX_INSN_SIZE = 16


class DecoderHandle(Protocol):
    def decode_one(self, code: bytes, address: int) -> Optional[DecodeResult]:
        """
        Decode exactly one instruction from the start of code.

        Args:
            code: Bytes starting at the instruction to decode
            address: Virtual address of code[0]

        Returns:
            The instruction and its operand detail, or None when nothing
            could be decoded (end of stream or engine failure)
        """
        ...

    def close(self) -> None:
        ...


class DecoderBackend(Protocol):
    def open(self, arch: Arch, bit_mode: BitMode) -> DecoderHandle:
        """
        Open a handle with full operand detail and skip-over-data enabled.

        Raises:
            UnsupportedArchitecture: No engine mode exists for the pair
            EngineError: The engine refused the configuration
        """
        ...
