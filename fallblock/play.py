"""
Manual play mode.

Polls the keyboard every frame, turns it into at most one Intent, feeds it
to the GameSession, and renders the session snapshot.

Controls:
  - Left/Right arrow: move piece
  - Down arrow: soft drop
  - Up arrow / Space: rotate
  - Enter: confirm on the title and result screens
  - Escape / close window: quit
"""

from __future__ import annotations

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from fallblock.config import GameConfig
from fallblock.game.randomizer import KindPicker
from fallblock.game.session import GameSession, SessionState
from fallblock.game.tetris import Intent, RoundController
from fallblock.renderer import GameRenderer


def held_intent(keys) -> Intent | None:
    """Map held keys to a single intent, first match wins.

    Args:
        keys: Sequence from pygame.key.get_pressed().
    """
    if keys[pygame.K_LEFT]:
        return Intent.MOVE_LEFT
    if keys[pygame.K_RIGHT]:
        return Intent.MOVE_RIGHT
    if keys[pygame.K_DOWN]:
        return Intent.SOFT_DROP
    if keys[pygame.K_UP] or keys[pygame.K_SPACE]:
        return Intent.ROTATE
    return None


def build_session(config: GameConfig) -> GameSession:
    """Create a session whose round follows the given config."""
    controller = RoundController(
        field_width=config.field_width,
        field_height=config.field_height,
        fall_interval=config.fall_interval,
        input_repeat_interval=config.input_repeat_interval,
        picker=KindPicker(config.seed),
    )
    return GameSession(controller)


def play_manual(config: GameConfig) -> None:
    """Run the game in manual (human) play mode until the window closes.

    Args:
        config: Loaded GameConfig.
    """
    if pygame is None:
        raise ImportError("pygame is required for play mode. Install it: pip install pygame")

    session = build_session(config)
    renderer = GameRenderer(
        field_width=config.field_width,
        field_height=config.field_height,
        preview_width=config.preview_width,
        preview_height=config.preview_height,
        cell_size=config.cell_size,
    )

    session.update()
    # Force renderer init before event loop (pygame must be initialized for event.get())
    renderer.render(session.get_state(), config.fps)
    print(f"Round started | Field: {config.field_width}x{config.field_height} | Fall interval: {config.fall_interval}s")

    running = True
    while running:
        confirm = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                    break
                if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    confirm = True

        if not running:
            break

        previous = session.state
        if session.state is SessionState.PLAYING:
            intent = held_intent(pygame.key.get_pressed())
        else:
            intent = Intent.CONFIRM if confirm else None
        current = session.update(intent)

        if current is not previous:
            if current is SessionState.RESULT:
                print(f"Game over | Pieces locked: {session.round.pieces_locked}")
            elif current is SessionState.PLAYING:
                print("Round started")

        renderer.render(session.get_state(), config.fps)

    renderer.close()
