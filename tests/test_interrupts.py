import pytest

from pongkernel.handlers import DecodedKey, HandlerTable, KeyCode
from pongkernel.interrupts import (
    APICOffset,
    CpuException,
    InterruptController,
    InterruptIndex,
    IoApic,
    LocalApic,
)


def test_offsets_and_vectors():
    assert APICOffset(0xB0) is APICOffset.EOI
    assert APICOffset(0xF0) is APICOffset.SVR
    assert APICOffset(0x320) is APICOffset.LVT_T
    assert InterruptIndex(0x20) is InterruptIndex.TIMER
    assert InterruptIndex(0x21) is InterruptIndex.KEYBOARD
    lapic = LocalApic()
    lapic.write(APICOffset.LVT_T, 7)
    assert lapic.read(0x320) == 7


def test_register_round_trip():
    lapic = LocalApic()
    assert lapic.read(APICOffset.TPR) == 0
    lapic.write(APICOffset.TPR, 0xDEADBEEF)
    assert lapic.read(0x80) == 0xDEADBEEF


def test_register_rejects_bad_values():
    lapic = LocalApic()
    with pytest.raises(ValueError):
        lapic.write(APICOffset.TPR, 1 << 32)
    with pytest.raises(ValueError):
        lapic.read(0x84)


def test_init_timer():
    lapic = LocalApic()
    lapic.write(APICOffset.SVR, 0xFF)
    lapic.init_timer()
    assert lapic.read(APICOffset.SVR) == 0x1FF
    assert lapic.read(APICOffset.LVT_T) == 0x20 | (1 << 17)
    assert lapic.read(APICOffset.TDCR) == 0x3
    assert lapic.read(APICOffset.TICR) == 0x0100_0000


def test_init_keyboard():
    lapic = LocalApic()
    lapic.init_keyboard()
    assert lapic.read(APICOffset.LVT_LINT1) == InterruptIndex.KEYBOARD


def test_io_apic_init():
    io = IoApic()
    io.init()
    assert io.words[0] == 0x12
    assert io.words[4] == InterruptIndex.KEYBOARD


def test_timer_without_handlers_still_ends_interrupt():
    lapic = LocalApic()
    controller = InterruptController(lapic)
    controller.timer_interrupt()
    assert lapic.end_of_interrupts == 1
    assert lapic.read(APICOffset.EOI) == 0


def test_init_idt_dispatches_timer_and_keyboard():
    lapic = LocalApic()
    controller = InterruptController(lapic)
    ticks = []
    keys = []
    table = HandlerTable().timer(lambda: ticks.append(1)).keyboard(keys.append)
    controller.init_idt(table)
    assert controller.enabled is True
    assert controller.ports[0x21] == 0xFF and controller.ports[0xA1] == 0xFF
    controller.timer_interrupt()
    controller.timer_interrupt()
    up = DecodedKey.raw(KeyCode.ARROW_UP)
    controller.keyboard_interrupt(up)
    assert len(ticks) == 2
    assert keys == [up]
    assert lapic.end_of_interrupts == 3


def test_incomplete_key_is_not_dispatched():
    controller = InterruptController(LocalApic())
    keys = []
    controller.init_idt(HandlerTable().keyboard(keys.append))
    controller.keyboard_interrupt(None)
    assert keys == []
    assert controller.lapic.end_of_interrupts == 1


def test_breakpoint_reports():
    controller = InterruptController(LocalApic())
    message = controller.breakpoint("frame")
    assert message.startswith("EXCEPTION: BREAKPOINT")
    assert "frame" in message


def test_faults_raise():
    controller = InterruptController(LocalApic())
    with pytest.raises(CpuException, match="PAGE FAULT"):
        controller.page_fault(0x1000, "PROTECTION_VIOLATION")
    with pytest.raises(CpuException, match="DOUBLE FAULT"):
        controller.double_fault("frame")