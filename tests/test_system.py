"""Tests for system instructions (0xxx) and the call stack."""

import jax.numpy as jnp
import pytest
from chip8vm import execute_word as execute, STACK_SIZE
from chip8vm import BadOperationError, EmptyStackError, FullStackError


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(framebuffer=jnp.full_like(fresh_state.framebuffer, 0xFF))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.framebuffer) == 0
    assert state.pc == fresh_state.pc + 2


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = int(state.pc)

    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[0] == initial_pc + 2

    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc + 2
    assert state.stack.pointer == 0


def test_nested_calls_unwind_in_order(fresh_state):
    """N nested calls followed by N returns retrace the call sites."""
    state = fresh_state
    call_sites = []
    for depth in range(STACK_SIZE):
        call_sites.append(int(state.pc))
        state = execute(state, 0x2000 | (0x300 + depth * 0x10))

    assert state.stack.pointer == STACK_SIZE

    for call_site in reversed(call_sites):
        state = execute(state, 0x00EE)
        assert state.pc == call_site + 2

    assert state.stack.pointer == 0


def test_return_on_empty_stack(fresh_state):
    """00EE without a matching call is fatal."""
    with pytest.raises(EmptyStackError):
        execute(fresh_state, 0x00EE)


def test_unmatched_return_after_balanced_calls(fresh_state):
    """The (N+1)-th return fails after N calls and N returns."""
    state = execute(fresh_state, 0x2300)
    state = execute(state, 0x2400)
    state = execute(state, 0x00EE)
    state = execute(state, 0x00EE)

    with pytest.raises(EmptyStackError):
        execute(state, 0x00EE)


def test_call_on_full_stack(fresh_state):
    """The 17th nested call is fatal."""
    state = fresh_state
    for _ in range(STACK_SIZE):
        state = execute(state, 0x2300)

    with pytest.raises(FullStackError):
        execute(state, 0x2300)


@pytest.mark.parametrize("instruction", [0x0000, 0x0123, 0x00E1, 0x00FF, 0x0EEF])
def test_undefined_system_instructions(fresh_state, instruction):
    """0NNN other than 00E0/00EE is fatal, never skipped."""
    with pytest.raises(BadOperationError) as excinfo:
        execute(fresh_state, instruction)
    assert str(excinfo.value) == f"PROCESSOR ERROR: Bad operation with bytes 0x{instruction:04X}"


def test_system_dispatch_uses_low_byte(fresh_state):
    """The X nibble of a 0x0 instruction is not decoded."""
    state = fresh_state.replace(framebuffer=jnp.full_like(fresh_state.framebuffer, 0xFF))
    state = execute(state, 0x01E0)
    assert jnp.sum(state.framebuffer) == 0
