"""Local and I/O APIC registers and dispatch of CPU interrupts to handlers."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

from pongkernel.handlers import DecodedKey, HandlerTable

logger = logging.getLogger(__name__)

_U32_MAX = 0xFFFF_FFFF
_PIC_MASTER_DATA = 0x21
_PIC_SLAVE_DATA = 0xA1


class APICOffset(IntEnum):
    """Byte offsets of the local APIC registers."""

    R0x00 = 0x0
    R0x10 = 0x10
    IR = 0x20
    VR = 0x30
    R0x40 = 0x40
    R0x50 = 0x50
    R0x60 = 0x60
    R0x70 = 0x70
    TPR = 0x80
    APR = 0x90
    PPR = 0xA0
    EOI = 0xB0
    RRD = 0xC0
    LDR = 0xD0
    DFR = 0xE0
    SVR = 0xF0
    ISR1 = 0x100
    ISR2 = 0x110
    ISR3 = 0x120
    ISR4 = 0x130
    ISR5 = 0x140
    ISR6 = 0x150
    ISR7 = 0x160
    ISR8 = 0x170
    TMR1 = 0x180
    TMR2 = 0x190
    TMR3 = 0x1A0
    TMR4 = 0x1B0
    TMR5 = 0x1C0
    TMR6 = 0x1D0
    TMR7 = 0x1E0
    TMR8 = 0x1F0
    IRR1 = 0x200
    IRR2 = 0x210
    IRR3 = 0x220
    IRR4 = 0x230
    IRR5 = 0x240
    IRR6 = 0x250
    IRR7 = 0x260
    IRR8 = 0x270
    ESR = 0x280
    R0x290 = 0x290
    R0x2A0 = 0x2A0
    R0x2B0 = 0x2B0
    R0x2C0 = 0x2C0
    R0x2D0 = 0x2D0
    R0x2E0 = 0x2E0
    LVT_CMCI = 0x2F0
    ICR1 = 0x300
    ICR2 = 0x310
    LVT_T = 0x320
    LVT_TSR = 0x330
    LVT_PMCR = 0x340
    LVT_LINT0 = 0x350
    LVT_LINT1 = 0x360
    LVT_E = 0x370
    TICR = 0x380
    TCCR = 0x390
    R0x3A0 = 0x3A0
    R0x3B0 = 0x3B0
    R0x3C0 = 0x3C0
    R0x3D0 = 0x3D0
    TDCR = 0x3E0
    R0x3F0 = 0x3F0


PIC_1_OFFSET = 0x20


class InterruptIndex(IntEnum):
    """Interrupt vectors used by the timer and the keyboard."""

    TIMER = PIC_1_OFFSET
    KEYBOARD = PIC_1_OFFSET + 1


class CpuException(Exception):
    """A fatal CPU exception such as a page fault or double fault."""


def _check_u32(value: int) -> int:
    if not 0 <= value <= _U32_MAX:
        raise ValueError(f"register value out of 32-bit range: {value:#x}")
    return value


@dataclass
class LocalApic:
    """The memory-mapped registers of a local APIC."""

    registers: Dict[APICOffset, int] = field(default_factory=dict)
    end_of_interrupts: int = 0

    def read(self, offset: Union[APICOffset, int]) -> int:
        """Read a 32-bit register; unwritten registers read as zero."""
        return self.registers.get(APICOffset(offset), 0)

    def write(self, offset: Union[APICOffset, int], value: int) -> None:
        """Write a 32-bit register."""
        self.registers[APICOffset(offset)] = _check_u32(value)

    def init_timer(self) -> None:
        """Enable the APIC and start the timer in periodic mode."""
        self.write(APICOffset.SVR, self.read(APICOffset.SVR) | 0x100)
        self.write(APICOffset.LVT_T, int(InterruptIndex.TIMER) | (1 << 17))
        self.write(APICOffset.TDCR, 0x3)
        self.write(APICOffset.TICR, 0x0100_0000)

    def init_keyboard(self) -> None:
        """Route the LINT1 line to the keyboard vector."""
        self.write(APICOffset.LVT_LINT1, int(InterruptIndex.KEYBOARD))

    def end_interrupt(self) -> None:
        """Signal the end of the current interrupt."""
        self.write(APICOffset.EOI, 0)
        self.end_of_interrupts += 1


@dataclass
class IoApic:
    """The first words of an I/O APIC's register window."""

    words: List[int] = field(default_factory=lambda: [0] * 8)

    def init(self) -> None:
        """Select the first redirection entry and point it at the keyboard vector."""
        self.words[0] = 0x12
        self.words[4] = int(InterruptIndex.KEYBOARD)


class InterruptController:
    """Owns the handler table and dispatches interrupts to it."""

    def __init__(self, lapic: LocalApic) -> None:
        self.lapic = lapic
        self.handlers: Optional[HandlerTable] = None
        self.enabled = False
        self.ports: Dict[int, int] = {}
        self._lock = threading.RLock()

    def _disable_pic(self) -> None:
        self.ports[_PIC_MASTER_DATA] = 0xFF
        self.ports[_PIC_SLAVE_DATA] = 0xFF

    def init_idt(self, handlers: HandlerTable) -> None:
        """Install the handler table and enable interrupts."""
        logger.debug("initialize IDT with LAPIC %r", self.lapic)
        self._disable_pic()
        with self._lock:
            self.handlers = handlers
        self.enabled = True

    def timer_interrupt(self) -> None:
        """Handle a timer interrupt."""
        with self._lock:
            if self.handlers is not None:
                self.handlers.handle_timer()
        self.lapic.end_interrupt()

    def keyboard_interrupt(self, key: Optional[DecodedKey]) -> None:
        """Handle a keyboard interrupt; ``None`` means no complete key yet."""
        if key is not None:
            with self._lock:
                if self.handlers is not None:
                    self.handlers.handle_keyboard(key)
        self.lapic.end_interrupt()

    def breakpoint(self, stack_frame: Any) -> str:
        """Report a breakpoint and carry on."""
        message = f"EXCEPTION: BREAKPOINT\n{stack_frame!r}"
        logger.warning(message)
        return message

    def page_fault(self, address: int, error_code: Any) -> None:
        """A page fault is fatal."""
        raise CpuException(
            f"EXCEPTION: PAGE FAULT access address: {address:#x}\n ErrorCode: {error_code!r}"
        )

    def double_fault(self, stack_frame: Any) -> None:
        """A double fault is fatal."""
        raise CpuException(f"EXCEPTION: DOUBLE FAULT\n{stack_frame!r}")