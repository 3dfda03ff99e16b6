"""
Address translation between raw buffer offsets and virtual addresses.

The disassembler only needs two conversions from the binary it works on, so
the loader side is plugged in through the AddressSpace protocol.
"""

from dataclasses import dataclass
from typing import Optional, Protocol


class AddressSpace(Protocol):
    def offset_to_va(self, offset: int) -> Optional[int]:
        ...

    def va_to_rva(self, va: int) -> Optional[int]:
        ...


@dataclass(frozen=True)
class FlatAddressSpace:
    """
    Image mapped contiguously at image_base.

    Args:
        image_base: Virtual address of offset 0
        image_size: Size of the mapped image, or None for no upper bound
    """

    image_base: int = 0
    image_size: Optional[int] = None

    def offset_to_va(self, offset: int) -> Optional[int]:
        if offset < 0:
            return None
        if self.image_size is not None and offset >= self.image_size:
            return None
        return self.image_base + offset

    def va_to_rva(self, va: int) -> Optional[int]:
        if va < self.image_base:
            return None
        rva = va - self.image_base
        if self.image_size is not None and rva >= self.image_size:
            return None
        return rva
