"""Pong driven by a handler table, with a framebuffer writer, allocators and an APIC model."""

__version__ = "0.1.0"