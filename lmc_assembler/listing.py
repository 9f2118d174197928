"""
Text and record views of decoded LMC instructions.

Used by the lmcasm CLI for its listing, JSON and CSV outputs.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence

from .decoder import Instruction

__all__ = ['format_code', 'format_listing', 'to_records']


def format_code(code: int) -> str:
    """Zero-pad instruction codes to the three LMC digits (DAT stays 1000)."""
    return f"{code:03d}"


def format_listing(instructions: Sequence[Instruction]) -> str:
    """Return a human-readable listing: index, mnemonic, code, operand."""
    lines = []
    lines.append(f"{'IDX':>4}  {'NAME':<4}  {'CODE':>4}  OPERAND")
    lines.append("-" * 30)

    for idx, instr in enumerate(instructions):
        operand = '' if instr.operand is None else str(instr.operand)
        lines.append(f"{idx:>4}  {instr.name:<4}  {format_code(instr.code):>4}  {operand}")

    return '\n'.join(lines)


def to_records(instructions: Sequence[Instruction]) -> List[Dict[str, Optional[int]]]:
    """Plain dicts for serializers (json, csv)."""
    return [
        {'name': instr.name, 'code': instr.code, 'operand': instr.operand}
        for instr in instructions
    ]
