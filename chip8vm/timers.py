"""CHIP-8 frame step: display hand-off and 60 Hz timers."""

import jax.numpy as jnp
from chip8vm.state import MachineState


def frame(state: MachineState) -> MachineState:
    """Advance one frame.

    Clears `display_changed`, decrements both timers towards zero and
    recomputes `sound_active` from the decremented sound timer.
    """
    delay = int(state.delay_timer)
    sound = int(state.sound_timer)
    delay = delay - 1 if delay > 0 else 0
    sound = sound - 1 if sound > 0 else 0
    return state.replace(
        display_changed=jnp.asarray(False),
        delay_timer=jnp.asarray(delay, dtype=jnp.uint8),
        sound_timer=jnp.asarray(sound, dtype=jnp.uint8),
        sound_active=jnp.asarray(sound > 0),
    )
