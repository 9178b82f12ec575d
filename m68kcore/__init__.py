"""Building blocks of a Motorola 68000 CPU core: opcode decoding, ALU operations, timings and exception bookkeeping."""

__version__ = "0.1.0"