"""
LMC Assembler front end
=======================
Decodes Little Man Computer assembly text into instruction records.

Architecture:
    ┌────────────┐    ┌──────────────────┐    ┌─────────────────────┐
    │ LMC Source │───>│ split_and_trim() │───>│ str_to_instructions │──> [Instruction]
    │ (.lmc)     │    │ (trimmed lines)  │    │ (table lookup)      │
    └────────────┘    └──────────────────┘    └─────────────────────┘

    - decoder.py: line normalizer, opcode table, decoder, errors
    - listing.py: listing / record views for the lmcasm CLI

Label resolution and memory image output belong to later stages and are
not part of this package.
"""

__version__ = "0.1.0"

from .decoder import (
    MNEMONICS, OPERAND_MAX, Instruction,
    DecodeError, UnknownMnemonic, InvalidOperand,
    split_and_trim, str_to_instructions, read_source, decode_file,
)
from .listing import format_code, format_listing, to_records

__all__ = [
    'MNEMONICS', 'OPERAND_MAX', 'Instruction',
    'DecodeError', 'UnknownMnemonic', 'InvalidOperand',
    'split_and_trim', 'str_to_instructions', 'read_source', 'decode_file',
    'format_code', 'format_listing', 'to_records',
]
