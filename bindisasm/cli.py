#!/usr/bin/env python3
"""
Command line front end: disassemble a region of a file and list, for each
instruction, its category and whether its target can be followed statically.
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

import structlog
import yaml

from .core.address_space import FlatAddressSpace
from .core.arch import Arch, BitMode
from .disassembler import Disassembler
from .logging_config import configure_logging

logger = structlog.get_logger()

DEFAULT_SIZE = 0x100


def parse_int(value: str) -> int:
    """Accept decimal or 0x-prefixed integers."""
    return int(value, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Disassemble a code region and report control-flow facts",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("file", help="Binary file to read the code from")
    parser.add_argument(
        "--arch",
        choices=[a.value for a in Arch],
        default=os.environ.get("BINDISASM_ARCH", Arch.INTEL.value),
        help="Instruction set"
    )
    parser.add_argument(
        "--bits",
        type=int,
        choices=[int(b) for b in BitMode],
        default=int(os.environ.get("BINDISASM_BITS", 32)),
        help="Address width"
    )
    parser.add_argument(
        "--offset",
        type=parse_int,
        default=0,
        help="Raw file offset where disassembly starts"
    )
    parser.add_argument(
        "--size",
        type=parse_int,
        default=DEFAULT_SIZE,
        help="Number of bytes to disassemble"
    )
    parser.add_argument(
        "--base",
        type=parse_int,
        default=0,
        help="Virtual address of file offset 0"
    )
    parser.add_argument(
        "--format",
        choices=["text", "json", "yaml"],
        default="text",
        help="Output format"
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("BINDISASM_LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level"
    )
    return parser


def collect_rows(disasm: Disassembler, file_offset: int = 0) -> List[Dict[str, Any]]:
    """
    One row per decoded instruction, addresses as hex strings.

    file_offset is the file position the code buffer was read from, so the
    "offset" column holds real file offsets.
    """
    rows = []
    for i, (insn, _detail) in enumerate(disasm.table):
        target = disasm.target_address(i)
        rows.append({
            "va": hex(insn.address),
            "offset": hex(file_offset + disasm.raw_offset_at(i)),
            "bytes": insn.raw.hex(),
            "text": insn.text,
            "type": disasm.mnem_type_at(i).value,
            "followable": disasm.is_followable(i),
            "target": hex(target) if target is not None else None,
        })
    return rows


def format_text(rows: List[Dict[str, Any]]) -> str:
    lines = []
    for row in rows:
        target = f" -> {row['target']}" if row["target"] else ""
        lines.append(
            f"{row['va']:>18}  {row['bytes']:<32} {row['text']:<40} [{row['type']}]{target}"
        )
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments and print the disassembly listing.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        with open(args.file, "rb") as f:
            f.seek(args.offset)
            code = f.read(args.size)
    except OSError as e:
        logger.error("Cannot read input file", file=args.file, error=str(e))
        return 1

    disasm = Disassembler(address_space=FlatAddressSpace(image_base=args.base))
    if not disasm.init(code, args.size, args.offset, Arch(args.arch), BitMode(args.bits)):
        logger.error("Disassembler initialization failed", arch=args.arch, bits=args.bits)
        return 1
    if not disasm.fill_table():
        logger.error("No instructions decoded", file=args.file, offset=hex(args.offset))
        return 1

    rows = collect_rows(disasm, args.offset)
    if args.format == "json":
        print(json.dumps(rows, indent=2))
    elif args.format == "yaml":
        print(yaml.dump(rows, default_flow_style=False, sort_keys=False), end="")
    else:
        print(format_text(rows))
    return 0


if __name__ == "__main__":
    sys.exit(main())
