"""Address arithmetic for virtual addresses of a given bit width."""
from typing import Union

from ..core.arch import BitMode


def address_mask(bit_mode: Union[BitMode, int]) -> int:
    """All-ones mask of the address width."""
    return (1 << int(bit_mode)) - 1

def trim_to_bit_mode(value: int, bit_mode: Union[BitMode, int]) -> int:
    """Wrap a (possibly negative) value to the address width, two's complement."""
    return value & address_mask(bit_mode)

def jump_dest_address(va: int, instr_len: int, disp: int) -> int:
    """Target of a relative transfer: displacement counts from the next instruction."""
    return va + instr_len + disp
