"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK, STACK_SIZE
from chip8vm.errors import EmptyStackError, FullStackError
from chip8vm.state import StackState


def push(stack: StackState, address: int) -> StackState:
    """Push address onto stack."""
    pointer = int(stack.pointer)
    if pointer >= STACK_SIZE:
        raise FullStackError()
    new_data = stack.data.at[pointer].set(address & ADDRESS_MASK)
    return stack.replace(data=new_data, pointer=jnp.asarray(pointer + 1, dtype=jnp.uint8))


def pop(stack: StackState) -> tuple[StackState, int]:
    """Pop address from stack."""
    if int(stack.pointer) == 0:
        raise EmptyStackError()
    new_pointer = int(stack.pointer) - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=jnp.asarray(new_pointer, dtype=jnp.uint8)), popped_address
