from .backend import DecoderBackend, DecoderHandle, DecodeResult, MAX_INSN_SIZE
from .capstone_backend import CapstoneBackend, CapstoneHandle
from .session import DecoderSession, InstructionCursor

__all__ = [
    "DecoderBackend",
    "DecoderHandle",
    "DecodeResult",
    "MAX_INSN_SIZE",
    "CapstoneBackend",
    "CapstoneHandle",
    "DecoderSession",
    "InstructionCursor",
]
