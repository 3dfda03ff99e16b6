import pytest
from capstone import CS_GRP_BRANCH_RELATIVE, CS_GRP_JUMP, CS_GRP_RET
from capstone import arm64_const, x86_const

from bindisasm import Arch, BitMode, FlatAddressSpace, MnemType
from fakes import entry, imm, mem, reg

PUSH = x86_const.X86_INS_PUSH
RET = x86_const.X86_INS_RET
JMP = x86_const.X86_INS_JMP
JE = x86_const.X86_INS_JE
CALL = x86_const.X86_INS_CALL
MOV = x86_const.X86_INS_MOV
ADD = x86_const.X86_INS_ADD
EAX = x86_const.X86_REG_EAX
RIP = x86_const.X86_REG_RIP


class RejectingAddressSpace:
    """Maps offsets normally but knows no RVA for any VA."""

    def offset_to_va(self, offset):
        return 0x400000 + offset

    def va_to_rva(self, va):
        return None


def test_push_then_return(scripted_disasm):
    disasm = scripted_disasm([
        entry(PUSH, 5, imm(0x401000)),
        entry(RET, 1),
    ])
    assert disasm.mnem_type_at(0) == MnemType.PUSH
    assert disasm.mnem_type_at(1) == MnemType.RET
    assert disasm.is_push_then_return(0) == (True, 1)
    assert disasm.is_push_then_return(1) == (False, None)
    assert disasm.is_followable(0)
    assert not disasm.is_followable(1)
    assert disasm.target_address(0) == 0x401000
    assert disasm.target_address(1) is None


def test_push_at_last_index_is_not_push_then_return(scripted_disasm):
    disasm = scripted_disasm([
        entry(RET, 1),
        entry(PUSH, 5, imm(0x401000)),
    ])
    assert disasm.is_push_then_return(1) == (False, None)
    assert disasm.is_push_then_return(5) == (False, None)
    assert not disasm.is_followable(1)


def test_push_followed_by_other_instruction(scripted_disasm):
    disasm = scripted_disasm([
        entry(PUSH, 5, imm(0x401000)),
        entry(ADD, 3, reg(EAX), imm(1, size=1)),
        entry(RET, 1),
    ])
    assert disasm.is_push_then_return(0) == (False, None)
    assert not disasm.is_followable(0)


def test_followable_operand_shapes(scripted_disasm):
    disasm = scripted_disasm([
        entry(JMP, 5, imm(0x401100)),                      # 0: direct
        entry(CALL, 6, mem(disp=0x402000)),                # 1: [abs]
        entry(CALL, 6, mem(base=RIP, disp=0x10)),          # 2: [rip+disp]
        entry(JMP, 3, mem(base=EAX, disp=4)),              # 3: [eax+4]
        entry(CALL, 2, reg(EAX)),                          # 4: call eax
        entry(JE, 2, imm(0x401000)),                       # 5: conditional
        entry(MOV, 5, reg(EAX), imm(0x401000)),            # 6: not a branch
        entry(JMP, 1),                                     # 7: no operand
    ])
    assert disasm.is_followable(0)
    assert disasm.is_followable(1)
    assert disasm.is_followable(2)
    assert not disasm.is_followable(3)
    assert not disasm.is_followable(4)
    assert disasm.is_followable(5)
    assert not disasm.is_followable(6)
    assert not disasm.is_followable(7)
    assert not disasm.is_followable(8)

    assert disasm.target_address(1) == 0x402000
    assert disasm.target_address(2) == disasm.va_at(2) + 6 + 0x10
    assert disasm.target_address(3) is None


def test_not_followable_without_known_address(scripted_disasm):
    disasm = scripted_disasm([entry(JMP, 5, imm(0x401100))], address_space=RejectingAddressSpace())
    assert disasm.va_at(0) == 0x401000
    assert disasm.rva_at(0) is None
    assert not disasm.is_followable(0)
    assert disasm.target_address(0) is None


def test_followable_stops_at_image_end(scripted_disasm):
    space = FlatAddressSpace(image_base=0x400000, image_size=0x1000)
    disasm = scripted_disasm([
        entry(JMP, 5, imm(0x400010)),
        entry(JMP, 5, imm(0x400010)),
    ], offset=0xFFF, address_space=space)
    assert disasm.rva_at(0) == 0xFFF
    assert disasm.is_followable(0)
    assert disasm.rva_at(1) is None
    assert not disasm.is_followable(1)


def test_is_likely_address_operand(scripted_disasm):
    disasm = scripted_disasm([
        entry(PUSH, 2, imm(1, size=1)),                    # push: always
        entry(MOV, 2, reg(EAX), reg(x86_const.X86_REG_EBX)),  # mov: always
        entry(ADD, 6, reg(EAX), mem(base=RIP, disp=0x10)),  # rip-relative
        entry(ADD, 3, reg(EAX), imm(1, size=1)),           # small immediate
        entry(ADD, 11, reg(EAX), imm(0x1234, size=10)),    # immediate wider than 8 bytes
        entry(ADD, 2, reg(EAX), mem(base=EAX)),            # register memory
        entry(RET, 1),
    ])
    assert disasm.is_likely_address_operand(0)
    assert disasm.is_likely_address_operand(1)
    assert disasm.is_likely_address_operand(2)
    assert not disasm.is_likely_address_operand(3)
    assert disasm.is_likely_address_operand(4)
    assert not disasm.is_likely_address_operand(5)
    assert not disasm.is_likely_address_operand(6)
    assert not disasm.is_likely_address_operand(7)


def test_arm64_followable_requires_immediate(scripted_disasm):
    x0 = arm64_const.ARM64_REG_X0
    disasm = scripted_disasm([
        entry(arm64_const.ARM64_INS_B, 4, imm(0x2000), groups=(CS_GRP_JUMP, CS_GRP_BRANCH_RELATIVE)),
        entry(arm64_const.ARM64_INS_CBZ, 4, reg(x0), imm(0x2000), groups=(CS_GRP_JUMP, CS_GRP_BRANCH_RELATIVE)),
        entry(arm64_const.ARM64_INS_BR, 4, reg(x0), groups=(CS_GRP_JUMP,)),
        entry(arm64_const.ARM64_INS_RET, 4, groups=(CS_GRP_RET,)),
    ], arch=Arch.ARM, bit_mode=BitMode.BITS_64, image_base=0)
    assert disasm.mnem_type_at(0) == MnemType.JUMP
    assert disasm.mnem_type_at(1) == MnemType.COND_JUMP
    assert disasm.mnem_type_at(3) == MnemType.RET
    assert disasm.is_followable(0)
    assert not disasm.is_followable(1)  # first operand is the tested register
    assert not disasm.is_followable(2)
    assert not disasm.is_followable(3)
    assert disasm.resolve_operand_address(1, 1) == 0x2000


def test_is_branching(scripted_disasm):
    disasm = scripted_disasm([
        entry(JMP, 5, imm(0)),
        entry(x86_const.X86_INS_LOOP, 2, imm(0)),
        entry(RET, 1),
    ])
    assert disasm.is_branching(0)
    assert disasm.is_branching(1)
    assert not disasm.is_branching(2)
    assert not disasm.is_branching(3)
