"""
Decoder session and the cursor walking the input buffer.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from ..core.arch import Arch, BitMode
from ..core.errors import EngineError, UnsupportedArchitecture
from ..core.instruction import Instruction, OperandDetail
from .backend import DecoderBackend, DecoderHandle, MAX_INSN_SIZE

logger = structlog.get_logger()


@dataclass
class InstructionCursor:
    """Read position in the input buffer and the VA assigned to it."""

    buf: memoryview
    address: int = 0
    pos: int = 0
    consumed: int = 0  # bytes decoded since the cursor was created

    @property
    def remaining(self) -> int:
        return len(self.buf) - self.pos

    def window(self) -> bytes:
        return bytes(self.buf[self.pos:self.pos + MAX_INSN_SIZE])

    def advance(self, size: int) -> None:
        self.pos += size
        self.address += size
        self.consumed += size


class DecoderSession:
    """
    Owns the engine handle for one (architecture, bit width) pair and the
    single result slot every decode step writes into.
    """

    def __init__(self, backend: DecoderBackend):
        self._backend = backend
        self._handle: Optional[DecoderHandle] = None
        self.is_init = False
        self.insn: Optional[Instruction] = None
        self.detail: Optional[OperandDetail] = None

    def open(self, arch: Arch, bit_mode: BitMode) -> bool:
        self.close()
        try:
            self._handle = self._backend.open(arch, bit_mode)
        except UnsupportedArchitecture:
            logger.error("Unsupported architecture", arch=arch.value, bits=int(bit_mode))
            return False
        except EngineError as e:
            logger.error("Failed to open decode engine", error=str(e), errno=e.errno)
            return False
        self.is_init = True
        return True

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self.is_init = False
        self.insn = None
        self.detail = None

    def decode_next(self, cursor: InstructionCursor) -> int:
        """
        Decode one instruction at the cursor and advance it.

        Returns:
            Number of bytes consumed; 0 on end of stream, decode failure or
            when the session is not initialized. A failure leaves the session
            uninitialized until it is opened again.
        """
        if not self.is_init:
            logger.warning("Cannot decode next: not initialized")
            return 0
        result = None
        if cursor.remaining > 0:
            result = self._handle.decode_one(cursor.window(), cursor.address)
        if result is None or result[0].size <= 0:
            self.is_init = False
            return 0
        self.insn, self.detail = result
        cursor.advance(self.insn.size)
        return self.insn.size
