"""
Little Man Computer source decoder.

Turns LMC assembly text into an ordered list of Instruction records.

Input:  Source text, one instruction per line
Output: List of Instruction(name, code, operand)

Line format:
  MNEMONIC            e.g. INP, OUT, HLT
  MNEMONIC OPERAND    e.g. ADD 12, DAT 1000
  // comment          whole-line comments only

How the decoder works:
  Single pass, no symbol table. Each line is trimmed, comment lines are
  dropped, and the line is split on single spaces. The first token is looked
  up in MNEMONICS, the second (if any) is parsed as an unsigned 16-bit
  decimal number. The first bad line aborts the whole decode.

  Labels are not supported at this stage: a line such as "loop LDA 5" fails
  with UnknownMnemonic('loop').
"""

from __future__ import annotations
from typing import List, Optional
from dataclasses import dataclass
from types import MappingProxyType
import logging
import re

__all__ = [
    'MNEMONICS', 'OPERAND_MAX', 'Instruction',
    'DecodeError', 'UnknownMnemonic', 'InvalidOperand',
    'split_and_trim', 'str_to_instructions', 'read_source', 'decode_file',
]

log = logging.getLogger(__name__)


# ──────────────────────────────────────────────
# Errors
# ──────────────────────────────────────────────

class DecodeError(Exception):
    """Raised when a source line cannot be decoded."""
    def __init__(self, message: str, token: str = "", line_num: int = 0, line_text: str = ""):
        self.token = token
        self.line_num = line_num
        self.line_text = line_text
        super().__init__(f"Line {line_num}: {message}" if line_num else message)


class UnknownMnemonic(DecodeError):
    """First token of a line is not in MNEMONICS."""
    def __init__(self, token: str, line_num: int = 0, line_text: str = ""):
        super().__init__(f"unknown instruction '{token}'", token, line_num, line_text)


class InvalidOperand(DecodeError):
    """Second token of a line is not an unsigned 16-bit number."""
    def __init__(self, token: str, line_num: int = 0, line_text: str = ""):
        super().__init__(f"invalid operand '{token}'", token, line_num, line_text)


# ──────────────────────────────────────────────
# LMC Opcode Table
# ──────────────────────────────────────────────
# DAT is a data directive, not a machine instruction; 1000 sits outside
# the 000-999 instruction space so later stages can tell it apart.

MNEMONICS = MappingProxyType({
    'HLT': 0,
    'ADD': 1,
    'SUB': 2,
    'STA': 3,
    'LDA': 5,
    'BRA': 6,
    'BRZ': 7,
    'BRP': 8,
    'INP': 901,
    'OUT': 902,
    'DAT': 1000,
})

OPERAND_MAX = 0xFFFF

_OPCODE_VALUES = frozenset(MNEMONICS.values())
_OPERAND_RE = re.compile(r'\+?[0-9]+')
_OPERAND_DIGITS = len(str(OPERAND_MAX))

# Unicode White_Space. str.strip() with no argument also drops \x1c-\x1f.
_WHITESPACE = (
    '\t\n\x0b\x0c\r \x85\xa0\u1680'
    '\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a'
    '\u2028\u2029\u202f\u205f\u3000'
)


@dataclass(frozen=True)
class Instruction:
    """One decoded source line."""
    name: str
    code: int
    operand: Optional[int] = None

    def __post_init__(self):
        if self.code not in _OPCODE_VALUES:
            raise ValueError(f"{self.name}: code {self.code} is not in the LMC opcode table")

    def __str__(self) -> str:
        if self.operand is None:
            return self.name
        return f"{self.name} {self.operand}"


# ──────────────────────────────────────────────
# Line handling
# ──────────────────────────────────────────────

def split_and_trim(source: str) -> List[str]:
    """Split source on '\\n' and strip Unicode whitespace from each line.

    Empty lines are kept. ASCII separators \\x1c-\\x1f are not whitespace here.
    """
    return [line.strip(_WHITESPACE) for line in source.split('\n')]


def _parse_operand(token: str, line_num: int, line_text: str) -> int:
    """Parse an operand token as an unsigned 16-bit decimal number."""
    # int() alone would also take '_', inner spaces and non-ASCII digits
    if not _OPERAND_RE.fullmatch(token):
        raise InvalidOperand(token, line_num, line_text)
    # int() refuses very long digit strings, so drop leading zeros and cap length first
    digits = token.lstrip('+').lstrip('0') or '0'
    if len(digits) > _OPERAND_DIGITS:
        raise InvalidOperand(token, line_num, line_text)
    value = int(digits)
    if value > OPERAND_MAX:
        raise InvalidOperand(token, line_num, line_text)
    return value


def str_to_instructions(source: str) -> List[Instruction]:
    """Decode LMC source text into instructions, in source order.

    Blank lines, '//' comment lines and lines whose first token is empty
    are skipped. Raises UnknownMnemonic or InvalidOperand on the first
    bad line; nothing is returned in that case.
    """
    instructions: List[Instruction] = []
    skipped = 0

    for line_num, line in enumerate(split_and_trim(source), 1):
        if line.startswith('//'):
            skipped += 1
            continue

        parts = line.split(' ')
        name = parts[0]

        code = MNEMONICS.get(name)
        if code is None:
            if name == '':
                skipped += 1
                continue
            raise UnknownMnemonic(name, line_num, line)

        operand = None
        if len(parts) > 1:
            operand = _parse_operand(parts[1], line_num, line)
        if len(parts) > 2:
            log.debug("Line %d: ignoring trailing tokens %r", line_num, parts[2:])

        instructions.append(Instruction(name, code, operand))

    log.debug("Decoded %d instructions (%d lines skipped)", len(instructions), skipped)
    return instructions


def read_source(path, encoding: str = 'utf-8') -> str:
    """Read an LMC source file. Line endings are left untouched."""
    with open(path, 'r', encoding=encoding, newline='') as f:
        source = f.read()
    log.debug("Read %d characters from %s", len(source), path)
    return source


def decode_file(path, encoding: str = 'utf-8') -> List[Instruction]:
    """Read an LMC source file and decode it."""
    return str_to_instructions(read_source(path, encoding))
