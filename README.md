# m68kcore

Pure-Python building blocks for a Motorola 68000 CPU core. It needs only the
standard library.

## Modules

- `m68kcore.sizes`: the `SizeType` operand sizes (`BYTE`, `WORD`, `LONG`) and
  `size_in_bytes`.
- `m68kcore.instructions`: the `InstType` enumeration of instruction kinds. `NONE`
  marks an illegal opcode.
- `m68kcore.addressing`: the `AddressingMode` enumeration and the `EaModes` groups
  of modes that instructions accept. `decode_mode` turns a 6-bit effective-address
  field into a mode. `supported_modes` returns the modes in a group, and
  `mode_is_supported` tests whether a mode belongs to one.
- `m68kcore.opcodes`: a table of bit templates (`OPCODES`, made of `Instruction`
  entries). `matches` tests an opcode against one entry. `build_opcode_map` returns
  the instruction kind of every opcode from 0 to 0xFFFF. `decode` looks up one
  opcode; the table is built on first use.
- `m68kcore.privilege`: `is_authorized(inst, supervisor)` returns False when a
  privileged instruction is used outside supervisor mode.
- `m68kcore.exception_manager`: `ExceptionManager` records raised exceptions and the
  data some of them carry: the address/bus error details (`AddressError`), the
  interrupt level and the trap vector. `ExceptionType`, `ExceptionGroup` and
  `group_exceptions` describe the exceptions and their priority groups.
- `m68kcore.pc_corrector`: `correct_address_error(pc, sird, error)` returns the PC
  value to push for an address error.
- `m68kcore.risers`: `InterruptRiser` raises interrupts from the interrupt level on
  the bus and the interrupt mask. `TraceRiser` raises a trace exception when an
  instruction finishes while tracing is on.
- `m68kcore.timings`: the extra cycles each instruction takes beyond its bus reads
  and writes.
- `m68kcore.alu`: addition, subtraction, logic, compare, move, multiply, divide, BCD,
  `ext`, `swap` and `tas`. These operations update a `StatusFlags` object with the
  fields `x`, `n`, `z`, `v`, `c`. `alu`, `unary` and `aluq` dispatch on an
  `InstType`.
- `m68kcore.bitops`: shifts and rotates, bit test/set/clear/change, `chk`,
  `cond_test`, the ANDI/ORI/EORI to CCR/SR operations, `move_to_sr`, `move_to_ccr`,
  `ret` and `advance_pc`.

## Installation

```
pip install .
```

## Example

```python
from m68kcore.opcodes import decode
from m68kcore.instructions import InstType
from m68kcore.alu import StatusFlags, add
from m68kcore.sizes import SizeType

assert decode(0x4E71) is InstType.NOP

flags = StatusFlags()
result = add(0xFF, 0x01, SizeType.BYTE, flags)
assert result == 0x00
assert flags.z == 1 and flags.c == 1 and flags.x == 1
```

```python
from m68kcore.exception_manager import ExceptionManager, ExceptionType

exman = ExceptionManager()
exman.rise_trap(33)
assert exman.is_raised(ExceptionType.TRAP)
assert exman.accept_trap() == 33
assert not exman.is_raised_any()
```

## Errors

`InternalError` from `m68kcore.errors` is raised when the package is used in a way
it does not allow. Examples are accepting an exception that is not raised, passing
an instruction kind that an operation does not handle, or calling the generic
`ExceptionManager.rise` for an exception that carries data. `NotImplementedFeature`
is raised when an exception that is already pending is raised again.
`opcodes.decode` raises `ValueError` for an opcode outside 0..0xFFFF.
`alu.divs` raises `ZeroDivisionError` for a zero divisor.

## What it does not do

This package is not a complete emulator. It has no bus, memory map, register file,
bus cycle scheduler, or unit that executes instructions or processes exceptions.
It provides no command-line program. The functions work on plain integers and
`StatusFlags`, and the caller supplies registers and memory contents.

## Running the tests

```
pip install .[test]
pytest
```