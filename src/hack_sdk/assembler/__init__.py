"""
Hack Assembler
==============

This package assembles Hack assembly language into 16-bit binary machine
instructions, one "0"/"1" line per instruction.

Main Components
---------------
- **Assembler**: Orchestrates parsing, symbol resolution and encoding
- **parser**: Turns source lines into AddressCommand, ComputeCommand and
  LabelDef values
- **SymbolTable**: Predefined aliases, labels (pass 1) and variables (pass 2)
- **opcodes**: Fixed comp/dest/jump tables and the instruction encoders

Assembly Process
----------------
1. **Parsing**: strip "//" comments, classify each line
2. **Pass 1**: bind each "(LABEL)" to the address of the next instruction
3. **Pass 2**: resolve each "@symbol" to a predefined alias, a label,
   a numeric literal or a newly allocated variable (from RAM[16])
4. **Encoding**: 0vvvvvvvvvvvvvvv for addresses, 111accccccdddjjj for
   computations

Example Usage
-------------
>>> from hack_sdk.assembler import assemble
>>> assemble("@2\\nD=A")
['0000000000000010', '1110110000010000']
"""

from hack_sdk.assembler.assembler import Assembler, assemble, assemble_file
from hack_sdk.assembler.parser import (
    AddressCommand,
    ComputeCommand,
    LabelDef,
    parse_line,
    parse_source,
)
from hack_sdk.assembler.symbols import PREDEFINED_SYMBOLS, VARIABLE_BASE, SymbolTable
from hack_sdk.assembler.opcodes import (
    COMP_TABLE,
    DEST_TABLE,
    JUMP_TABLE,
    decode_compute,
    encode_address,
    encode_compute,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Parser
    "AddressCommand",
    "ComputeCommand",
    "LabelDef",
    "parse_line",
    "parse_source",
    # Symbols
    "SymbolTable",
    "PREDEFINED_SYMBOLS",
    "VARIABLE_BASE",
    # Encoding
    "COMP_TABLE",
    "DEST_TABLE",
    "JUMP_TABLE",
    "encode_address",
    "encode_compute",
    "decode_compute",
]
