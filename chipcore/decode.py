"""CHIP-8 instruction decoding."""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    family: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    kk: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    return DecodedInstruction(
        raw=instruction,
        family=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        kk=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


_ALU_MNEMONICS = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
    0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}

_MISC_FORMATS = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def disassemble(instruction: int) -> str:
    """Return the assembler mnemonic for a raw 16-bit instruction.

    Words that do not encode an instruction come back as ``DW 0xNNNN``.
    Works on plain Python integers only, not on traced values.
    """
    instruction = int(instruction) & 0xFFFF
    family = instruction >> 12
    x = (instruction >> 8) & 0xF
    y = (instruction >> 4) & 0xF
    n = instruction & 0xF
    kk = instruction & 0xFF
    nnn = instruction & 0xFFF

    if instruction == 0x00E0:
        return "CLS"
    if instruction == 0x00EE:
        return "RET"
    if family == 0x1:
        return f"JP 0x{nnn:03X}"
    if family == 0x2:
        return f"CALL 0x{nnn:03X}"
    if family == 0x3:
        return f"SE V{x:X}, 0x{kk:02X}"
    if family == 0x4:
        return f"SNE V{x:X}, 0x{kk:02X}"
    if family == 0x5 and n == 0:
        return f"SE V{x:X}, V{y:X}"
    if family == 0x6:
        return f"LD V{x:X}, 0x{kk:02X}"
    if family == 0x7:
        return f"ADD V{x:X}, 0x{kk:02X}"
    if family == 0x8 and n in _ALU_MNEMONICS:
        return f"{_ALU_MNEMONICS[n]} V{x:X}, V{y:X}"
    if family == 0x9 and n == 0:
        return f"SNE V{x:X}, V{y:X}"
    if family == 0xA:
        return f"LD I, 0x{nnn:03X}"
    if family == 0xB:
        return f"JP V0, 0x{nnn:03X}"
    if family == 0xC:
        return f"RND V{x:X}, 0x{kk:02X}"
    if family == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"
    if family == 0xE and kk == 0x9E:
        return f"SKP V{x:X}"
    if family == 0xE and kk == 0xA1:
        return f"SKNP V{x:X}"
    if family == 0xF and kk in _MISC_FORMATS:
        return _MISC_FORMATS[kk].format(x=x)
    return f"DW 0x{instruction:04X}"
