"""Two-pass assembler producing little-endian 32-bit instruction words."""