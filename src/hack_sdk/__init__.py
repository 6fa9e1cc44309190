"""
Hack SDK - Toolchain for the Hack Computer
==========================================

This package provides the two back-end stages of the Hack toolchain:

Main Components
---------------
- **vm**: VM translator (hackvm)
    Lowers stack-machine VM code (.vm) into Hack assembly (.asm)

- **assembler**: Hack assembler (hackasm)
    Converts Hack assembly (.asm) into 16-bit binary words (.hack)

Quick Start
-----------
Translate a program and assemble it:
    >>> from hack_sdk import VMTranslator, Assembler
    >>> vm = VMTranslator()
    >>> vm.translate_paths(["FibonacciElement/"])
    >>> asm = Assembler()
    >>> code = asm.assemble_string("\\n".join(vm.get_output()))

Or use the command-line tools:
    $ hackvm FibonacciElement/
    $ hackasm FibonacciElement/FibonacciElement.asm
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from hack_sdk.assembler import Assembler
from hack_sdk.config import TranslatorConfig
from hack_sdk.vm import VMTranslator
from hack_sdk.errors import (
    HackError,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    UnknownComputationError,
    UnknownDestinationError,
    UnknownJumpError,
    DuplicateLabelError,
    UnresolvedSymbolError,
    AddressRangeError,
    TranslatorError,
    VMSyntaxError,
    MalformedOperandError,
    InvalidSegmentError,
    InvalidPointerIndexError,
    SegmentIndexError,
    EntryPointError,
    ConfigError,
)

__all__ = [
    "__version__",
    # Drivers
    "Assembler",
    "VMTranslator",
    "TranslatorConfig",
    # Errors
    "HackError",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "UnknownComputationError",
    "UnknownDestinationError",
    "UnknownJumpError",
    "DuplicateLabelError",
    "UnresolvedSymbolError",
    "AddressRangeError",
    "TranslatorError",
    "VMSyntaxError",
    "MalformedOperandError",
    "InvalidSegmentError",
    "InvalidPointerIndexError",
    "SegmentIndexError",
    "EntryPointError",
    "ConfigError",
]
