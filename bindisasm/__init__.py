"""
Semantic analysis of decoded machine code: instruction categories, operand
addresses and statically followable control flow for x86 and ARM.
"""

from .core import (
    Arch,
    BitMode,
    MnemType,
    Instruction,
    Operand,
    OperandDetail,
    OperandKind,
    MemoryRef,
    InstructionTable,
    AddressSpace,
    FlatAddressSpace,
    DisasmError,
    UnsupportedArchitecture,
    EngineError,
)
from .engine import CapstoneBackend, DecoderBackend, DecoderHandle
from .disassembler import Disassembler

__version__ = "0.1.0"

__all__ = [
    "Arch",
    "BitMode",
    "MnemType",
    "Instruction",
    "Operand",
    "OperandDetail",
    "OperandKind",
    "MemoryRef",
    "InstructionTable",
    "AddressSpace",
    "FlatAddressSpace",
    "DisasmError",
    "UnsupportedArchitecture",
    "EngineError",
    "CapstoneBackend",
    "DecoderBackend",
    "DecoderHandle",
    "Disassembler",
]
