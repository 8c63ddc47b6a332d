"""Errors reported by the CHIP-8 core.

Instruction handlers run under JAX tracing and cannot raise, so run-time
faults are recorded in the state and converted to exceptions here, on the
host side.
"""

from typing import Optional

from chipcore.constants import (
    FAULT_NONE, FAULT_DECODE, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW
)
from chipcore.decode import disassemble
from chipcore.logging import get_logger

logger = get_logger()


class Chip8Error(Exception):
    """Base class for all errors raised by chipcore."""


class RomTooLargeError(Chip8Error):
    """ROM image does not fit between PROGRAM_START and the end of memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"ROM is {size} bytes, at most {capacity} bytes fit in memory")


class MachineFault(Chip8Error):
    """Run-time fault that halted the machine.

    Attributes:
        code: Fault code as stored in ``EmulatorState.fault``
        address: Address of the faulting instruction
        opcode: Raw 16-bit word found at that address
    """
    code = FAULT_NONE
    description = "machine fault"

    def __init__(self, address: int, opcode: int):
        self.address = address
        self.opcode = opcode
        super().__init__(
            f"{self.description} at 0x{address:03X}: "
            f"0x{opcode:04X} ({disassemble(opcode)})"
        )


class DecodeError(MachineFault):
    code = FAULT_DECODE
    description = "undefined instruction"


class StackOverflowError(MachineFault):
    code = FAULT_STACK_OVERFLOW
    description = "stack overflow"


class StackUnderflowError(MachineFault):
    code = FAULT_STACK_UNDERFLOW
    description = "return with empty stack"


FAULT_TYPES = {
    fault_type.code: fault_type
    for fault_type in (DecodeError, StackOverflowError, StackUnderflowError)
}


def get_fault(state) -> Optional[MachineFault]:
    """Return the fault recorded in state, or None if the machine is running."""
    code = int(state.fault)
    if code == FAULT_NONE:
        return None
    return FAULT_TYPES[code](int(state.fault_address), int(state.fault_opcode))


def raise_if_faulted(state):
    """Raise the recorded fault, if any, otherwise return state unchanged."""
    fault = get_fault(state)
    if fault is not None:
        logger.error(str(fault))
        raise fault
    return state
