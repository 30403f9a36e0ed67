"""Emulator that runs assembled binaries and reports the final machine state."""