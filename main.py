"""
pygame host for the CHIP-8 virtual machine, with a small debugger overlay
"""

import sys
import time

import numpy as np
import pygame

from chip8vm import Machine, Quirks, Chip8Error
from chip8vm.config import HostConfig, build_parser
from chip8vm.keypad import QWERTY_LAYOUT, KeypadTracker, keys_to_mask
from chip8vm.disassembler import listing
from chip8vm.logging import EmulatorLogger
from chip8vm.rendering import framebuffer_to_rgb, framebuffer_to_text, create_color_scheme
from chip8vm.runner import run_headless

KEY_MAP = {getattr(pygame, f"K_{char}"): key for char, key in QWERTY_LAYOUT.items()}


class Beeper:
    """Plays a looping tone while the machine's sound is active."""

    def __init__(self, frequency: float, volume: float = 0.2, sample_rate: int = 44100):
        self.sound = None
        self.playing = False
        try:
            pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
        except pygame.error as e:
            print(f"No audio output available: {e}")
            return
        rate, _, channels = pygame.mixer.get_init()
        # One second of samples is a whole number of periods for integer frequencies
        t = np.arange(rate) / rate
        wave = (np.sin(2 * np.pi * frequency * t) * volume * 32767).astype(np.int16)
        if channels > 1:
            wave = np.repeat(wave[:, None], channels, axis=1)
        self.sound = pygame.sndarray.make_sound(np.ascontiguousarray(wave))

    def update(self, active: bool):
        if self.sound is None or active == self.playing:
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = active


def draw_overlay_text(surface, text_lines, position, font, bg_color=(0, 0, 0), text_color=(255, 255, 255), alpha=120):
    """Draw text with semi-transparent background overlay"""
    if not text_lines:
        return

    # Calculate overlay size
    line_height = font.get_height()
    max_width = max(font.size(line)[0] for line in text_lines)
    overlay_height = len(text_lines) * line_height + 8
    overlay_width = max_width + 16

    # Create semi-transparent overlay
    overlay = pygame.Surface((overlay_width, overlay_height))
    overlay.set_alpha(alpha)
    overlay.fill(bg_color)
    surface.blit(overlay, position)

    # Draw text lines
    x, y = position
    for i, line in enumerate(text_lines):
        text_surface = font.render(line, True, text_color)
        surface.blit(text_surface, (x + 8, y + 4 + i * line_height))


def debug_lines(state, paused, speed, quirks):
    lines = [
        f"PC: 0x{int(state.pc):03X}  I: 0x{int(state.I):04X}  SP: {int(state.stack.pointer)}",
        f"DT: {int(state.delay_timer):3d}  ST: {int(state.sound_timer):3d}",
        f"Speed: {speed:.2f}x  {'PAUSED' if paused else 'RUNNING'}",
        f"Quirks: shift={quirks.shift} load_store={quirks.load_store}",
    ]
    if bool(state.keypad_waiting):
        lines.append(f"Waiting for key -> V{int(state.keypad_register):X}")
    return lines


def register_lines(state):
    lines = []
    for i in range(0, 16, 4):
        lines.append(" ".join(f"V{j:X}:{int(state.V[j]):02X}" for j in range(i, i + 4)))
    return lines


def run_window(machine: Machine, config: HostConfig, rom_filename: str):
    """Main emulator loop"""
    pygame.init()
    width, height = 64 * config.scale, 32 * config.scale
    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption(f"CHIP-8 - {rom_filename}")
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, 18)

    on_color, off_color = create_color_scheme(config.color_scheme)
    beeper = Beeper(config.tone_hz)
    tracker = KeypadTracker()

    held_keys = set()
    running = True
    paused = False
    show_debug = False
    speed = 1.0
    tick_budget = 0.0
    game_surface = None

    print("Controls: Esc=Quit, P=Pause, N=Step, F=Frame, Backspace=Reset, +/-=Speed, F1/F2=Quirks, Tab=Debug")

    while running:
        clock.tick(config.fps)
        step_instruction = False
        step_frame = False

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    paused = not paused
                elif event.key == pygame.K_n and paused:
                    step_instruction = True
                elif event.key == pygame.K_f and paused:
                    step_frame = True
                elif event.key == pygame.K_TAB:
                    show_debug = not show_debug
                elif event.key == pygame.K_BACKSPACE:
                    machine.reset()
                    tracker.reset()
                    game_surface = None
                elif event.key == pygame.K_EQUALS:
                    speed = min(500.0, speed * 1.5)
                elif event.key == pygame.K_MINUS:
                    speed = max(0.01, speed / 1.5)
                elif event.key == pygame.K_F1:
                    q = machine.quirks
                    machine.quirks = Quirks(shift=not q.shift, load_store=q.load_store)
                elif event.key == pygame.K_F2:
                    q = machine.quirks
                    machine.quirks = Quirks(shift=q.shift, load_store=not q.load_store)
                elif event.key in KEY_MAP:
                    held_keys.add(KEY_MAP[event.key])
            elif event.type == pygame.KEYUP:
                if event.key in KEY_MAP:
                    held_keys.discard(KEY_MAP[event.key])

        keys = keys_to_mask(held_keys)
        edges = tracker.update(keys)
        if edges and not machine.halted:
            machine.keypad_press(edges)

        state = machine.snapshot()
        if not machine.halted:
            try:
                if step_instruction:
                    state = machine.tick(keys)
                elif step_frame:
                    state = machine.run_frame(keys, config.ticks_per_frame)
                elif not paused:
                    tick_budget += config.ticks_per_frame * speed
                    while tick_budget >= 1:
                        state = machine.tick(keys)
                        tick_budget -= 1
            except Chip8Error:
                paused = True

        if not paused and not machine.halted:
            # Sample the draw flag before the frame step clears it
            if bool(state.display_changed) or game_surface is None:
                rgb = framebuffer_to_rgb(state.framebuffer, config.scale, on_color, off_color)
                game_surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
            state = machine.frame()
        elif bool(state.display_changed) or game_surface is None:
            rgb = framebuffer_to_rgb(state.framebuffer, config.scale, on_color, off_color)
            game_surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))

        beeper.update(bool(state.sound_active) and not paused and not machine.halted)

        screen.blit(game_surface, (0, 0))
        if show_debug or paused or machine.halted:
            lines = debug_lines(state, paused, speed, machine.quirks)
            if machine.halted:
                lines.append(str(machine.error))
            draw_overlay_text(screen, lines, (5, 5), font, alpha=100)
            draw_overlay_text(screen, listing(state), (width - 190, 5), font, alpha=100)
            draw_overlay_text(screen, register_lines(state), (5, height - 80), font, alpha=80)

        pygame.display.flip()

    beeper.update(False)
    pygame.quit()


def run_console(machine: Machine, config: HostConfig, frames: int):
    """Run without a window, printing the screen whenever it changes."""
    def show(state):
        print("\033[2J\033[H" + framebuffer_to_text(state.framebuffer), flush=True)
        time.sleep(1 / config.fps)

    run_headless(machine, frames, config.ticks_per_frame, on_display=show)


def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        config = HostConfig.from_args(args)
        create_color_scheme(config.color_scheme)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 2

    logger = EmulatorLogger()
    logger.log_config(config.as_dict())
    machine = Machine(seed=config.seed, quirks=config.quirks, logger=logger)

    try:
        machine.load_rom(args.rom)
    except (OSError, Chip8Error) as e:
        logger.error(f"Could not load {args.rom}: {e}")
        return 1

    if args.headless:
        try:
            run_console(machine, config, args.frames)
        except Chip8Error:
            return 1
    else:
        run_window(machine, config, args.rom)
    return 0


if __name__ == "__main__":
    sys.exit(main())
