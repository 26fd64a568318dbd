# pongkernel

A Pong game wired up the way a tiny hobby kernel runs it: a pluggable
table of interrupt handlers, a model of the local and I/O APIC registers,
a bump heap allocator, a physical frame allocator over a boot memory map,
and a framebuffer writer that draws pixels and text into a byte buffer.

Everything works on plain Python objects and `bytearray`s, so the game
logic and the drawing can be driven and inspected from ordinary code.

## Install

```
pip install .
```

For the test suite:

```
pip install .[test]
pytest
```

## Modules

- `pongkernel.handlers`
  - `KeyCode` – keys without a character (arrows, function keys, ...).
  - `DecodedKey` – either a key code or a single character:
    `DecodedKey.raw(KeyCode.ARROW_UP)`, `DecodedKey.unicode(" ")`.
  - `HandlerTable` – builder of timer, keyboard, startup and CPU-loop
    handlers (`timer()`, `keyboard()`, `startup()`, `cpu_loop()` each return
    the table). `handle_timer()` and `handle_keyboard(key)` dispatch to the
    handlers that are set. `start(install)` runs the startup handler, passes
    the table to `install`, then calls the CPU loop and returns what it
    returns.
  - `hlt_loop()` – the default CPU loop; it blocks forever.
- `pongkernel.screen`
  - `FrameBufferInfo` – width, height, stride, bytes per pixel (1 to 4) and
    `PixelFormat`.
  - `ScreenWriter` – `draw_pixel(x, y, r, g, b)`, `write_pixel(x, y,
    intensity)`, `write_char(c)`, `write(text)` and `clear()`. Pixels outside
    the screen or the buffer are skipped. Formats other than RGB and BGR
    raise `UnsupportedPixelFormat`.
  - `init(framebuffer, info, rasterizer=None)` creates a shared writer and
    `screenwriter()` returns it (raising `RuntimeError` before `init`).
- `pongkernel.memory`
  - `BumpAllocator` – a fixed heap (100 KiB by default) handed out in
    aligned chunks by `alloc(size, align)`; it raises `MemoryError` when the
    heap is exhausted and `ValueError` for a bad alignment. `dealloc` only
    counts releases; memory is never reused.
  - `MemoryRegion`, `MemoryRegionKind` and `BootInfoFrameAllocator`, which
    yields 4 KiB frames from the usable regions (`usable_frames()`) and hands
    them out one by one (`allocate_frame()`, `None` once they run out).
- `pongkernel.pong`
  - `PongGame(width, height)` – player paddle on the left, a
    computer-controlled paddle on the right, first to 5 points wins.
    `handle_key`, `update`, `reset`, `new_game` and `render(writer)`.
- `pongkernel.interrupts`
  - `APICOffset` and `InterruptIndex` (timer `0x20`, keyboard `0x21`).
  - `LocalApic` – register reads and writes, `init_timer()`,
    `init_keyboard()`, `end_interrupt()`; `IoApic.init()`.
  - `InterruptController` – `init_idt(handlers)` installs a `HandlerTable`;
    `timer_interrupt()` and `keyboard_interrupt(key)` dispatch to it and
    signal end of interrupt. `page_fault` and `double_fault` raise
    `CpuException`; `breakpoint` returns and logs a report.
- `pongkernel.kernel`
  - `Kernel(writer, width, height)` ties a `ScreenWriter` to a `PongGame`;
    `handler_table()` returns a `HandlerTable` whose startup, timer and
    keyboard handlers are `start`, `tick` and `key`.

## Example

```python
from pongkernel.handlers import DecodedKey, KeyCode
from pongkernel.interrupts import InterruptController, LocalApic
from pongkernel.kernel import Kernel
from pongkernel.screen import FrameBufferInfo, ScreenWriter

width, height = 640, 480
info = FrameBufferInfo(width=width, height=height, stride=width, bytes_per_pixel=4)
writer = ScreenWriter(bytearray(width * height * 4), info)

kernel = Kernel(writer, width, height)
controller = InterruptController(LocalApic())

# Replace the default CPU loop, which never returns.
kernel.handler_table().cpu_loop(lambda: None).start(controller.init_idt)

controller.keyboard_interrupt(DecodedKey.raw(KeyCode.ARROW_UP))
for _ in range(10):
    controller.timer_interrupt()

print(kernel.game.player_score, kernel.game.computer_score)
```

Controls: the Up and Down arrows move your paddle; space starts a new game
once one is over.

## What it does not do

- There is no command to run and no window: frames are drawn into the
  `bytearray` you hand to `ScreenWriter`, and showing it is up to you.
- Nothing reads a real keyboard or timer. Keys arrive as `DecodedKey`
  values and ticks as calls to `timer_interrupt()` or `Kernel.tick()`;
  scancode decoding is not included.
- The default text rasterizer draws each printable character as an outlined
  block, not as a font glyph. Pass your own `rasterizer` to `ScreenWriter`
  or `init` for real lettering.
- The APIC, PIC ports and allocators are models held in memory; nothing
  boots, touches hardware or launches an emulator.