"""
Mnemonic classification: maps an engine opcode id (and, for ARM, the
engine-assigned instruction groups) to a semantic MnemType.

One classifier exists per architecture; the disassembler picks it once when
it is initialized, so the queries never branch on the architecture.
"""

from typing import Dict, FrozenSet

from capstone import (
    CS_GRP_BRANCH_RELATIVE,
    CS_GRP_CALL,
    CS_GRP_INT,
    CS_GRP_JUMP,
    CS_GRP_RET,
)
from capstone import arm_const, arm64_const, x86_const

from ..core.arch import Arch, BitMode, MnemType, BRANCHING_TYPES
from ..core.instruction import Instruction, OperandDetail

# Contiguous id ranges in the x86 opcode enumeration (both ends inclusive)
X86_COND_JUMP_RANGE = (x86_const.X86_INS_JAE, x86_const.X86_INS_JS)
X86_MOV_RANGE = (x86_const.X86_INS_MOV, x86_const.X86_INS_MOVZX)

X86_JUMPS = frozenset({x86_const.X86_INS_JMP, x86_const.X86_INS_LJMP})

X86_MNEM_TYPES: Dict[int, MnemType] = {
    x86_const.X86_INS_LOOP: MnemType.LOOP,
    x86_const.X86_INS_LOOPE: MnemType.LOOP,
    x86_const.X86_INS_LOOPNE: MnemType.LOOP,

    x86_const.X86_INS_CALL: MnemType.CALL,
    x86_const.X86_INS_LCALL: MnemType.CALL,

    x86_const.X86_INS_RET: MnemType.RET,
    x86_const.X86_INS_RETF: MnemType.RET,
    x86_const.X86_INS_RETFQ: MnemType.RET,

    x86_const.X86_INS_NOP: MnemType.NOP,

    x86_const.X86_INS_POP: MnemType.POP,
    x86_const.X86_INS_POPAW: MnemType.POP,
    x86_const.X86_INS_POPAL: MnemType.POP,
    x86_const.X86_INS_POPCNT: MnemType.POP,
    x86_const.X86_INS_POPF: MnemType.POP,
    x86_const.X86_INS_POPFD: MnemType.POP,
    x86_const.X86_INS_POPFQ: MnemType.POP,

    x86_const.X86_INS_PUSH: MnemType.PUSH,
    x86_const.X86_INS_PUSHAW: MnemType.PUSH,
    x86_const.X86_INS_PUSHAL: MnemType.PUSH,
    x86_const.X86_INS_PUSHF: MnemType.PUSH,
    x86_const.X86_INS_PUSHFD: MnemType.PUSH,
    x86_const.X86_INS_PUSHFQ: MnemType.PUSH,

    x86_const.X86_INS_INT3: MnemType.INT3,
    x86_const.X86_INS_INT: MnemType.INTX,
}


class MnemonicClassifier:
    def classify(self, insn: Instruction, detail: OperandDetail) -> MnemType:
        raise NotImplementedError


class IntelClassifier(MnemonicClassifier):
    """x86 classification by opcode id; the groups are not consulted."""

    def classify(self, insn: Instruction, detail: OperandDetail) -> MnemType:
        mnem = insn.id
        if mnem == x86_const.X86_INS_INVALID:
            return MnemType.INVALID
        if mnem in X86_JUMPS:
            return MnemType.JUMP
        if X86_COND_JUMP_RANGE[0] <= mnem <= X86_COND_JUMP_RANGE[1]:
            return MnemType.COND_JUMP
        if X86_MOV_RANGE[0] <= mnem <= X86_MOV_RANGE[1]:
            return MnemType.MOV
        return X86_MNEM_TYPES.get(mnem, MnemType.OTHER)


class ArmClassifier(MnemonicClassifier):
    """
    ARM classification: a few opcode ids are checked directly, everything
    else is decided by the first recognised instruction group.

    Args:
        trap_id: Opcode id of the permanently undefined instruction
        invalid_id: Opcode id the engine uses for invalid encodings
        nop_id: Opcode id of NOP
        cond_branch_ids: Compare/test-and-branch opcodes, which sit in the
            jump group but only branch conditionally
    """

    def __init__(self, trap_id: int, invalid_id: int, nop_id: int, cond_branch_ids: FrozenSet[int]):
        self.trap_id = trap_id
        self.invalid_id = invalid_id
        self.nop_id = nop_id
        self.cond_branch_ids = cond_branch_ids

    def classify(self, insn: Instruction, detail: OperandDetail) -> MnemType:
        mnem = insn.id
        if mnem == self.trap_id:
            return MnemType.INT3
        if mnem == self.invalid_id:
            return MnemType.INVALID
        if mnem == self.nop_id:
            return MnemType.NOP

        for group in detail.groups:
            if group == CS_GRP_CALL:
                return MnemType.CALL
            if group == CS_GRP_RET:
                return MnemType.RET
            if group == CS_GRP_INT:
                return MnemType.INTX
            if group == CS_GRP_JUMP or group == CS_GRP_BRANCH_RELATIVE:
                if mnem in self.cond_branch_ids:
                    return MnemType.COND_JUMP
                return MnemType.JUMP
        return MnemType.OTHER


ARM64_CLASSIFIER = ArmClassifier(
    trap_id=arm64_const.ARM64_INS_UDF,
    invalid_id=arm64_const.ARM64_INS_INVALID,
    nop_id=arm64_const.ARM64_INS_NOP,
    cond_branch_ids=frozenset({
        arm64_const.ARM64_INS_CBZ,
        arm64_const.ARM64_INS_CBNZ,
        arm64_const.ARM64_INS_TBZ,
        arm64_const.ARM64_INS_TBNZ,
    }),
)

ARM_CLASSIFIER = ArmClassifier(
    trap_id=arm_const.ARM_INS_UDF,
    invalid_id=arm_const.ARM_INS_INVALID,
    nop_id=arm_const.ARM_INS_NOP,
    cond_branch_ids=frozenset({arm_const.ARM_INS_CBZ, arm_const.ARM_INS_CBNZ}),
)

INTEL_CLASSIFIER = IntelClassifier()


def classifier_for(arch: Arch, bit_mode: BitMode) -> MnemonicClassifier:
    if arch == Arch.INTEL:
        return INTEL_CLASSIFIER
    if bit_mode == BitMode.BITS_64:
        return ARM64_CLASSIFIER
    return ARM_CLASSIFIER


def is_branching(mnem: MnemType) -> bool:
    return mnem in BRANCHING_TYPES
