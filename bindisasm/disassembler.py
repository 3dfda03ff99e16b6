"""
Disassembler facade: decodes a code region into an instruction table and
answers per-instruction questions about it.

Typical use:

    disasm = Disassembler(address_space=FlatAddressSpace(image_base=0x400000))
    if disasm.init(code, len(code), 0x1000, Arch.INTEL, BitMode.BITS_32):
        disasm.fill_table()
        for i in range(len(disasm)):
            print(hex(disasm.va_at(i)), disasm.text_at(i), disasm.is_followable(i))

init() and fill_table() hold an exclusive lock. The queries do not: they
must not be called while another thread is rebuilding the table.
"""

import threading
from typing import Optional, Tuple, Union

import structlog

from .analysis import control_flow
from .analysis.mnemonic_classifier import classifier_for
from .analysis.operand_resolver import resolve_operand_address
from .core.address_space import AddressSpace, FlatAddressSpace
from .core.arch import Arch, BitMode, MnemType
from .core.instruction import Instruction, OperandDetail
from .core.table import InstructionTable
from .engine.backend import DecoderBackend
from .engine.capstone_backend import CapstoneBackend
from .engine.session import DecoderSession, InstructionCursor

logger = structlog.get_logger()

Buffer = Union[bytes, bytearray, memoryview]


class Disassembler:
    def __init__(self, backend: Optional[DecoderBackend] = None, address_space: Optional[AddressSpace] = None):
        self.address_space = address_space if address_space is not None else FlatAddressSpace()
        self._session = DecoderSession(backend if backend is not None else CapstoneBackend())
        self._table = InstructionTable()
        self._cursor: Optional[InstructionCursor] = None
        self._lock = threading.Lock()
        self._disasm_size = 0
        self.start_va: Optional[int] = None

    @property
    def is_init(self) -> bool:
        return self._session.is_init

    @property
    def arch(self) -> Arch:
        return self._table.arch

    @property
    def bit_mode(self) -> BitMode:
        return self._table.bit_mode

    @property
    def table(self) -> InstructionTable:
        return self._table

    def init(self, buf: Buffer, disasm_size: int, offset: int, arch: Arch, bit_mode: Union[BitMode, int]) -> bool:
        """
        Bind a code buffer and open the decoder for it.

        Args:
            buf: Code bytes; buf[0] lies at raw offset `offset`
            disasm_size: Number of bytes fill_table() decodes per pass
            offset: Raw offset of buf[0], mapped to a VA by the address space
            arch: Instruction set family
            bit_mode: Address width (16, 32 or 64)

        Returns:
            True when the decoder is ready, False otherwise (logged)
        """
        with self._lock:
            self._session.close()
            self._cursor = None
            self._table.clear()
            if not buf:
                logger.warning("Nothing to disassemble: empty buffer")
                return False
            try:
                bit_mode = BitMode(bit_mode)
            except ValueError:
                logger.error("Unsupported bit mode", bits=bit_mode)
                return False

            self._disasm_size = disasm_size
            self.start_va = self.address_space.offset_to_va(offset)
            start = self.start_va if self.start_va is not None else 0
            self._cursor = InstructionCursor(memoryview(buf), address=start)
            self._table.configure(arch, bit_mode, classifier_for(arch, bit_mode))

            return self._session.open(arch, bit_mode)

    def decode_next(self) -> int:
        """Decode one instruction at the cursor; returns its size or 0."""
        return self._session.decode_next(self._cursor)

    def fill_table(self) -> bool:
        """
        Rebuild the table with up to disasm_size bytes of instructions.

        Decoding stops early at the first failure; the partial table is kept.
        The cursor is not rewound, so another call continues after the bytes
        already decoded. Returns False when no instruction was decoded.
        """
        with self._lock:
            self._table.clear()
            if not self.is_init:
                logger.warning("Cannot fill table: not initialized")
                return False

            pass_start = self._cursor.consumed
            while self._cursor.consumed - pass_start < self._disasm_size:
                if not self._session.decode_next(self._cursor):
                    break  # could not disassemble more
                self._table.append(self._session.insn, self._session.detail)

            if not len(self._table):
                return False
            processed = self._cursor.consumed - pass_start
            logger.debug("Instruction table filled", count=len(self._table), processed=processed)
            return True

    # --- queries ---

    def __len__(self) -> int:
        return len(self._table)

    def instruction_at(self, index: int) -> Optional[Instruction]:
        return self._table.insn_at(index)

    def detail_at(self, index: int) -> Optional[OperandDetail]:
        return self._table.detail_at(index)

    def va_at(self, index: int) -> Optional[int]:
        insn = self._table.insn_at(index)
        return insn.address if insn is not None else None

    def rva_at(self, index: int) -> Optional[int]:
        va = self.va_at(index)
        if va is None:
            return None
        return self.address_space.va_to_rva(va)

    def raw_offset_at(self, index: int) -> Optional[int]:
        va = self.va_at(index)
        if va is None:
            return None
        if self.start_va is None:
            return va
        return va - self.start_va

    def chunk_size_at(self, index: int) -> int:
        insn = self._table.insn_at(index)
        return insn.size if insn is not None else 0

    def mnemonic_at(self, index: int) -> str:
        insn = self._table.insn_at(index)
        return insn.mnemonic if insn is not None else ""

    def text_at(self, index: int) -> str:
        insn = self._table.insn_at(index)
        return insn.text if insn is not None else ""

    def mnem_type_at(self, index: int) -> MnemType:
        return self._table.mnem_type_at(index)

    def is_branching(self, index: int) -> bool:
        return control_flow.is_table_branching(self._table, index)

    def resolve_operand_address(self, index: int, operand_num: int) -> Optional[int]:
        return resolve_operand_address(self._table, index, operand_num)

    def is_push_then_return(self, index: int) -> Tuple[bool, Optional[int]]:
        return control_flow.is_push_then_return(self._table, index)

    def is_likely_address_operand(self, index: int) -> bool:
        return control_flow.is_likely_address_operand(self._table, index)

    def is_followable(self, index: int) -> bool:
        return control_flow.is_followable(self._table, index, self.address_space)

    def target_address(self, index: int) -> Optional[int]:
        return control_flow.target_address(self._table, index, self.address_space)
