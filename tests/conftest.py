import pytest

from bindisasm import Arch, BitMode, Disassembler, FlatAddressSpace
from fakes import ScriptedBackend


@pytest.fixture
def scripted_disasm():
    """
    Build a Disassembler over a scripted backend and fill its table.

    The buffer is sized to the script so every entry gets decoded.
    """
    def build(script, arch=Arch.INTEL, bit_mode=BitMode.BITS_32, offset=0x1000,
              image_base=0x400000, address_space=None):
        space = address_space if address_space is not None else FlatAddressSpace(image_base=image_base)
        disasm = Disassembler(backend=ScriptedBackend(script), address_space=space)
        size = sum(insn.size for insn, _ in script) or 1
        assert disasm.init(b"\x90" * size, size, offset, arch, bit_mode)
        disasm.fill_table()
        return disasm

    return build
