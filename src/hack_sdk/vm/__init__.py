"""
VM Translator
=============

This package lowers stack-machine VM code into Hack assembly text.

Main Components
---------------
- **VMTranslator**: Translates files, directories and strings into one program
- **parser**: Turns VM source lines into VMCommand values
- **CodeGenerator**: Lowers each VMCommand to Hack assembly lines
- **GeneratorState**: Label counters threaded through code generation

The output is plain assembly text; assemble it with hack_sdk.assembler.

Example Usage
-------------
>>> from hack_sdk.vm import translate
>>> lines = translate("push constant 7\\npush constant 8\\nadd")
>>> lines[0]
'@7'
"""

from hack_sdk.vm.parser import (
    ARITHMETIC_COMMANDS,
    SEGMENTS,
    CommandType,
    VMCommand,
    parse_line,
    parse_source,
)
from hack_sdk.vm.codegen import CodeGenerator, GeneratorState
from hack_sdk.vm.translator import VMTranslator, translate

__all__ = [
    # Main class and functions
    "VMTranslator",
    "translate",
    # Parser
    "CommandType",
    "VMCommand",
    "ARITHMETIC_COMMANDS",
    "SEGMENTS",
    "parse_line",
    "parse_source",
    # Code generator
    "CodeGenerator",
    "GeneratorState",
]
