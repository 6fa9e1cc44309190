"""
Hack Instruction Encoding Tables
================================

Binary layout of the two Hack instruction forms:

```
Address:  0vvv vvvv vvvv vvvv      v = 15-bit unsigned value
Compute:  111a cccc ccdd djjj      a c1..c6 = comp, d = dest, j = jump
```

The comp table holds the 28 legal computations. The "a" bit (first character
of each entry) selects M instead of A as the second ALU operand.

Lookups never fall back to a default: text missing from a table is a hard
error, because a silently zeroed field still produces a valid-looking word.
"""

from typing import Optional

from hack_sdk.errors import (
    AddressRangeError,
    AssemblerError,
    SourceLocation,
    UnknownComputationError,
    UnknownDestinationError,
    UnknownJumpError,
)


# Largest value an address command can load (15 bits)
MAX_ADDRESS = 0x7FFF

WORD_WIDTH = 16


# =============================================================================
# Field Tables
# =============================================================================

COMP_TABLE: dict[str, str] = {
    # a=0: second operand is A
    "0":   "0101010",
    "1":   "0111111",
    "-1":  "0111010",
    "D":   "0001100",
    "A":   "0110000",
    "!D":  "0001101",
    "!A":  "0110001",
    "-D":  "0001111",
    "-A":  "0110011",
    "D+1": "0011111",
    "A+1": "0110111",
    "D-1": "0001110",
    "A-1": "0110010",
    "D+A": "0000010",
    "D-A": "0010011",
    "A-D": "0000111",
    "D&A": "0000000",
    "D|A": "0010101",
    # a=1: second operand is M
    "M":   "1110000",
    "!M":  "1110001",
    "-M":  "1110011",
    "M+1": "1110111",
    "M-1": "1110010",
    "D+M": "1000010",
    "D-M": "1010011",
    "M-D": "1000111",
    "D&M": "1000000",
    "D|M": "1010101",
}

DEST_TABLE: dict[str, str] = {
    "":    "000",
    "M":   "001",
    "D":   "010",
    "MD":  "011",
    "A":   "100",
    "AM":  "101",
    "AD":  "110",
    "AMD": "111",
}

JUMP_TABLE: dict[str, str] = {
    "":    "000",
    "JGT": "001",
    "JEQ": "010",
    "JGE": "011",
    "JLT": "100",
    "JNE": "101",
    "JLE": "110",
    "JMP": "111",
}

# Reverse lookups for decoding
_COMP_BY_BITS = {bits: text for text, bits in COMP_TABLE.items()}
_DEST_BY_BITS = {bits: text for text, bits in DEST_TABLE.items()}
_JUMP_BY_BITS = {bits: text for text, bits in JUMP_TABLE.items()}


# =============================================================================
# Encoding
# =============================================================================

def encode_address(
    value: int,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> str:
    """
    Encode an address command.

    Args:
        value: Resolved address or constant (0..32767)

    Returns:
        16-character binary string with a leading 0

    Raises:
        AddressRangeError: If value does not fit in 15 bits
    """
    if value < 0 or value > MAX_ADDRESS:
        raise AddressRangeError(
            f"address {value} out of range (0..{MAX_ADDRESS})",
            location, source_line=source_line,
        )
    return f"0{value:015b}"


def encode_compute(
    dest: str,
    comp: str,
    jump: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> str:
    """
    Encode a compute command.

    Returns:
        16-character binary string "111" + comp + dest + jump

    Raises:
        UnknownComputationError: If comp is not in COMP_TABLE
        UnknownDestinationError: If dest is not in DEST_TABLE
        UnknownJumpError: If jump is not in JUMP_TABLE
    """
    comp_bits = COMP_TABLE.get(comp)
    if comp_bits is None:
        raise UnknownComputationError(comp, location, source_line)

    dest_bits = DEST_TABLE.get(dest)
    if dest_bits is None:
        raise UnknownDestinationError(dest, location, source_line)

    jump_bits = JUMP_TABLE.get(jump)
    if jump_bits is None:
        raise UnknownJumpError(jump, location, source_line)

    return f"111{comp_bits}{dest_bits}{jump_bits}"


def decode_compute(word: str) -> tuple[str, str, str]:
    """
    Split an encoded compute word back into (dest, comp, jump).

    Raises:
        AssemblerError: If word is not a valid compute instruction
    """
    if len(word) != WORD_WIDTH or not word.startswith("111") or set(word) - {"0", "1"}:
        raise AssemblerError(f"'{word}' is not a compute instruction")

    comp = _COMP_BY_BITS.get(word[3:10])
    if comp is None:
        raise AssemblerError(f"'{word}' has an undefined computation field")

    return _DEST_BY_BITS[word[10:13]], comp, _JUMP_BY_BITS[word[13:16]]
