"""
Operand resolution: the virtual address an operand refers to, when it can be
known from the encoding alone.
"""

from typing import Optional

from capstone import x86_const

from ..core.arch import Arch, BitMode
from ..core.instruction import Instruction, Operand, OperandKind
from ..core.table import InstructionTable
from ..utils.address import jump_dest_address, trim_to_bit_mode

INTEL_IP_REGISTERS = frozenset({
    x86_const.X86_REG_IP,
    x86_const.X86_REG_EIP,
    x86_const.X86_REG_RIP,
})


def is_ip_relative(op: Operand, arch: Arch) -> bool:
    """Memory operand addressed relative to the instruction pointer."""
    return (
        arch == Arch.INTEL
        and op.kind == OperandKind.MEMORY
        and op.mem.base in INTEL_IP_REGISTERS
    )


def is_static_operand(op: Operand, arch: Arch) -> bool:
    """
    True when the operand's address does not depend on register values at
    run time: an immediate, or on x86 a memory operand with no base register
    or with the instruction pointer as base.
    """
    if op.kind == OperandKind.IMMEDIATE:
        return True
    if arch != Arch.INTEL or op.kind != OperandKind.MEMORY:
        return False
    return not op.has_base or is_ip_relative(op, arch)


def operand_address(insn: Instruction, op: Operand, arch: Arch, bit_mode: BitMode) -> Optional[int]:
    """
    Resolve one operand of insn.

    Args:
        insn: Instruction the operand belongs to
        op: Operand to resolve
        arch: Architecture the instruction was decoded for
        bit_mode: Address width used to truncate the result

    Returns:
        The truncated virtual address, or None for operand shapes that can't
        be resolved statically
    """
    va = None
    if op.kind == OperandKind.IMMEDIATE:
        va = op.imm
    elif op.kind == OperandKind.MEMORY and arch == Arch.INTEL:
        if is_ip_relative(op, arch):
            va = jump_dest_address(insn.address, insn.size, op.mem.disp)
        elif not op.has_base:
            va = op.mem.disp
        # Any other base depends on a run-time register value
    if va is None:
        return None
    return trim_to_bit_mode(va, bit_mode)


def resolve_operand_address(table: InstructionTable, index: int, operand_num: int) -> Optional[int]:
    insn = table.insn_at(index)
    if insn is None:
        return None
    detail = table.detail_at(index)
    if operand_num < 0 or operand_num >= detail.op_count:
        return None
    return operand_address(insn, detail.operands[operand_num], table.arch, table.bit_mode)
