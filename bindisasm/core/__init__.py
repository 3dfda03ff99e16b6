from .arch import Arch, BitMode, MnemType, BRANCHING_TYPES
from .instruction import Instruction, Operand, OperandDetail, OperandKind, MemoryRef, NO_REGISTER
from .errors import DisasmError, UnsupportedArchitecture, EngineError
from .address_space import AddressSpace, FlatAddressSpace
from .table import InstructionTable

__all__ = [
    "Arch",
    "BitMode",
    "MnemType",
    "BRANCHING_TYPES",
    "Instruction",
    "Operand",
    "OperandDetail",
    "OperandKind",
    "MemoryRef",
    "NO_REGISTER",
    "DisasmError",
    "UnsupportedArchitecture",
    "EngineError",
    "AddressSpace",
    "FlatAddressSpace",
    "InstructionTable",
]
