"""Assembler and emulator for a subset of the AArch64 instruction set."""

__version__ = "0.1.0"