"""
Control-flow queries over a decoded instruction table: branch detection,
the push/ret indirect-jump idiom and static follow-ability of targets.
"""

from typing import Optional, Tuple

from ..core.address_space import AddressSpace
from ..core.arch import MnemType
from ..core.instruction import OperandKind
from ..core.table import InstructionTable
from .mnemonic_classifier import is_branching
from .operand_resolver import is_ip_relative, is_static_operand, resolve_operand_address

# Immediates wider than this many bytes are taken to hold an address
ADDR_IMM_MIN_SIZE = 8


def is_push_then_return(table: InstructionTable, index: int) -> Tuple[bool, Optional[int]]:
    """
    Detect `push <target>; ret`, which jumps to <target> through the stack.

    Returns:
        (True, index of the return) when the pattern starts at index,
        (False, None) otherwise
    """
    if table.mnem_type_at(index) != MnemType.PUSH:
        return False, None
    ret_index = index + 1
    if not table.in_range(ret_index):
        return False, None
    if table.mnem_type_at(ret_index) != MnemType.RET:
        return False, None
    return True, ret_index


def is_likely_address_operand(table: InstructionTable, index: int) -> bool:
    """Heuristic used to highlight operands that probably hold an address."""
    if not table.in_range(index):
        return False
    mnem = table.mnem_type_at(index)
    if mnem in (MnemType.PUSH, MnemType.MOV):
        return True

    for op in table.detail_at(index).operands:
        if op.kind == OperandKind.IMMEDIATE and op.size > ADDR_IMM_MIN_SIZE:
            return True
        if is_ip_relative(op, table.arch):
            return True
    return False


def is_table_branching(table: InstructionTable, index: int) -> bool:
    return is_branching(table.mnem_type_at(index))


def is_followable(table: InstructionTable, index: int, address_space: AddressSpace) -> bool:
    """
    Whether the instruction at index is a control-flow edge whose target can
    be computed from the encoding alone.
    """
    insn = table.insn_at(index)
    if insn is None:
        return False
    if address_space.va_to_rva(insn.address) is None:
        return False
    if not is_table_branching(table, index) and not is_push_then_return(table, index)[0]:
        return False

    detail = table.detail_at(index)
    if not detail.op_count:
        return False
    return is_static_operand(detail.operands[0], table.arch)


def target_address(table: InstructionTable, index: int, address_space: AddressSpace) -> Optional[int]:
    """Resolved first operand of a followable instruction, else None."""
    if not is_followable(table, index, address_space):
        return None
    return resolve_operand_address(table, index, 0)
