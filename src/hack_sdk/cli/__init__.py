"""
Hack SDK Command-Line Interface
===============================

This package provides the command-line tools for the Hack SDK:

- **hackasm**: Hack assembler (.asm to .hack)
- **hackvm**: VM translator (.vm files or directories to .asm)

Both tools are Click applications sharing the exit codes and error
reporting in hack_sdk.cli.errors.
"""

__all__ = ["hackasm", "hackvm"]
