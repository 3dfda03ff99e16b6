"""
Capstone implementation of the decode-engine capability.
"""

from typing import Dict, Optional, Tuple

import structlog
from capstone import (
    Cs,
    CsError,
    CS_ARCH_ARM,
    CS_ARCH_ARM64,
    CS_ARCH_X86,
    CS_ERR_ARCH,
    CS_MODE_16,
    CS_MODE_32,
    CS_MODE_64,
    CS_MODE_ARM,
)
from capstone import arm_const, arm64_const, x86_const

from ..core.arch import Arch, BitMode
from ..core.errors import EngineError, UnsupportedArchitecture
from ..core.instruction import Instruction, MemoryRef, Operand, OperandDetail, OperandKind
from .backend import DecodeResult

logger = structlog.get_logger()

CAPSTONE_MODES: Dict[Tuple[Arch, BitMode], Tuple[int, int]] = {
    (Arch.INTEL, BitMode.BITS_16): (CS_ARCH_X86, CS_MODE_16),
    (Arch.INTEL, BitMode.BITS_32): (CS_ARCH_X86, CS_MODE_32),
    (Arch.INTEL, BitMode.BITS_64): (CS_ARCH_X86, CS_MODE_64),
    (Arch.ARM, BitMode.BITS_32): (CS_ARCH_ARM, CS_MODE_ARM),
    (Arch.ARM, BitMode.BITS_64): (CS_ARCH_ARM64, CS_MODE_ARM),
}

OPERAND_KINDS: Dict[int, Dict[int, OperandKind]] = {
    CS_ARCH_X86: {
        x86_const.X86_OP_REG: OperandKind.REGISTER,
        x86_const.X86_OP_IMM: OperandKind.IMMEDIATE,
        x86_const.X86_OP_MEM: OperandKind.MEMORY,
    },
    CS_ARCH_ARM: {
        arm_const.ARM_OP_REG: OperandKind.REGISTER,
        arm_const.ARM_OP_IMM: OperandKind.IMMEDIATE,
        arm_const.ARM_OP_MEM: OperandKind.MEMORY,
    },
    CS_ARCH_ARM64: {
        arm64_const.ARM64_OP_REG: OperandKind.REGISTER,
        arm64_const.ARM64_OP_IMM: OperandKind.IMMEDIATE,
        arm64_const.ARM64_OP_MEM: OperandKind.MEMORY,
    },
}


def convert_operand(op, kinds: Dict[int, OperandKind]) -> Operand:
    """Copy one Capstone operand into an Operand record."""
    kind = kinds.get(op.type, OperandKind.OTHER)
    # Only the x86 operand structure carries an access size
    size = getattr(op, "size", 0)
    if kind == OperandKind.REGISTER:
        return Operand(kind, size, reg=op.reg)
    if kind == OperandKind.IMMEDIATE:
        return Operand(kind, size, imm=op.imm)
    if kind == OperandKind.MEMORY:
        return Operand(kind, size, mem=MemoryRef(op.mem.base, op.mem.index, op.mem.disp))
    return Operand(kind, size)


class CapstoneHandle:
    """One configured Capstone instance."""

    def __init__(self, cs: Cs, cs_arch: int):
        self._cs = cs
        self._kinds = OPERAND_KINDS[cs_arch]

    def decode_one(self, code: bytes, address: int) -> Optional[DecodeResult]:
        insns = self._cs.disasm(code, address, 1)
        try:
            insn = next(insns, None)
            if insn is None:
                return None
            return self._convert(insn)
        except CsError as e:
            logger.warning("Capstone decode failed", address=hex(address), errno=e.errno)
            return None
        finally:
            insns.close()

    def _convert(self, insn) -> DecodeResult:
        record = Instruction(
            id=insn.id,
            address=insn.address,
            size=insn.size,
            mnemonic=insn.mnemonic,
            op_str=insn.op_str,
            raw=bytes(insn.bytes),
        )
        # Skipped data comes back with id 0 and has no detail to read
        if insn.id == 0:
            return record, OperandDetail()
        detail = OperandDetail(
            operands=tuple(convert_operand(op, self._kinds) for op in insn.operands),
            groups=tuple(insn.groups),
        )
        return record, detail

    def close(self) -> None:
        self._cs = None


class CapstoneBackend:
    """Opens Capstone handles for the supported architecture modes."""

    def open(self, arch: Arch, bit_mode: BitMode) -> CapstoneHandle:
        mapping = CAPSTONE_MODES.get((arch, BitMode(bit_mode)))
        if mapping is None:
            raise UnsupportedArchitecture(arch, bit_mode)
        cs_arch, cs_mode = mapping
        try:
            cs = Cs(cs_arch, cs_mode)
        except CsError as e:
            if e.errno == CS_ERR_ARCH:
                raise UnsupportedArchitecture(arch, bit_mode) from e
            raise EngineError(f"Failed on Capstone open: {e}", errno=e.errno) from e
        try:
            cs.detail = True
            cs.skipdata = True
        except CsError as e:
            raise EngineError(f"Failed to configure Capstone: {e}", errno=e.errno) from e
        return CapstoneHandle(cs, cs_arch)
