"""
Pygame renderer for the falling-block game.

Reads a session snapshot once per frame and draws the field, the active
piece, the next piece preview, and the title / result overlays. The
renderer never touches the field or pieces directly.
"""

from __future__ import annotations

from typing import Any

import numpy as np

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from fallblock.game.pieces import BlockKind
from fallblock.game.session import SessionState


# ── Color constants ───────────────────────────────────────────────────────
BACKGROUND_COLOR = (30, 30, 30)
GRID_LINE_COLOR = (60, 60, 60)
BORDER_COLOR = (200, 200, 200)
TEXT_COLOR = (255, 255, 255)
SIDEBAR_BG_COLOR = (20, 20, 20)
OVERLAY_COLOR = (0, 0, 0, 150)

# ── BlockKind -> RGB color mapping ────────────────────────────────────────
BLOCK_COLORS: dict[BlockKind, tuple[int, int, int]] = {
    BlockKind.NONE: (0, 0, 0),
    BlockKind.I: (0, 255, 255),    # cyan
    BlockKind.O: (255, 255, 0),    # yellow
    BlockKind.S: (0, 255, 0),      # green
    BlockKind.Z: (255, 0, 0),      # red
    BlockKind.J: (0, 0, 255),      # blue
    BlockKind.L: (255, 128, 0),    # orange
    BlockKind.T: (128, 0, 128),    # purple
}


def block_color(kind: int) -> tuple[int, int, int]:
    """Return the display color for a cell kind (black for empty/unknown)."""
    try:
        return BLOCK_COLORS[BlockKind(int(kind))]
    except ValueError:
        return BLOCK_COLORS[BlockKind.NONE]


class GameRenderer:
    """Pygame-based renderer for a GameSession snapshot.

    The window is divided into:
      - Left: the field, cell_size * field_width by cell_size * field_height
      - Right: sidebar with the NEXT preview frame

    Attributes:
        cell_size: Pixel size of each grid cell.
        field_width: Field width in cells.
        field_height: Field height in cells.
        preview_width: Preview frame width in cells.
        preview_height: Preview frame height in cells.
        screen: Pygame display surface (created on first render).
    """

    SIDEBAR_WIDTH_CELLS: int = 6

    def __init__(
        self,
        field_width: int = 10,
        field_height: int = 20,
        preview_width: int = 4,
        preview_height: int = 4,
        cell_size: int = 30,
    ) -> None:
        """Initialize the renderer.

        Does NOT create the Pygame window yet; that happens on the first
        call to render().
        """
        if pygame is None:
            raise ImportError("pygame is required for rendering. Install it: pip install pygame")

        self.cell_size = cell_size
        self.field_width = field_width
        self.field_height = field_height
        self.preview_width = preview_width
        self.preview_height = preview_height

        self.board_pixel_width = cell_size * field_width
        self.board_pixel_height = cell_size * field_height
        self.sidebar_width = cell_size * self.SIDEBAR_WIDTH_CELLS
        self.window_width = self.board_pixel_width + self.sidebar_width
        self.window_height = self.board_pixel_height

        self.screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._font: pygame.font.Font | None = None
        self._initialized: bool = False

    def render(self, state: dict[str, Any], fps: int = 60) -> None:
        """Draw a session snapshot to the screen.

        Args:
            state: Snapshot from GameSession.get_state().
            fps: Target frames per second for the display clock.
        """
        if not self._initialized:
            self._init_pygame()

        self.screen.fill(BACKGROUND_COLOR)
        self._draw_field(state["field"], state["active_kind"], state["active_cells"])
        self._draw_sidebar(state["next_kind"], state["next_cells"])

        pygame.draw.rect(
            self.screen,
            BORDER_COLOR,
            (0, 0, self.board_pixel_width, self.board_pixel_height),
            2,
        )

        session_state = state.get("session_state")
        if session_state is SessionState.TITLE:
            self._draw_overlay("FALLBLOCK", "Press ENTER to start")
        elif session_state is SessionState.RESULT:
            self._draw_overlay("GAME OVER", "Press ENTER to continue")

        pygame.display.flip()
        self._clock.tick(fps)

    def _init_pygame(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("Fallblock")
        self._clock = pygame.time.Clock()
        self._font = pygame.font.SysFont("monospace", 20)
        self._large_font = pygame.font.SysFont("monospace", 36, bold=True)
        self._initialized = True

    def _draw_cell(self, x: int, y: int, size: int, color: tuple[int, int, int]) -> None:
        pygame.draw.rect(self.screen, color, (x, y, size, size))
        if color != BLOCK_COLORS[BlockKind.NONE]:
            # Slightly darker border for 3D effect
            darker = tuple(max(0, c - 40) for c in color)
            pygame.draw.rect(self.screen, darker, (x, y, size, size), 1)
        pygame.draw.rect(self.screen, GRID_LINE_COLOR, (x, y, size, size), 1)

    def _draw_field(
        self,
        grid: np.ndarray,
        active_kind: BlockKind,
        active_cells: list[tuple[int, int]],
    ) -> None:
        """Draw locked cells, then the active piece on top."""
        for row in range(self.field_height):
            for col in range(self.field_width):
                self._draw_cell(
                    col * self.cell_size,
                    row * self.cell_size,
                    self.cell_size,
                    block_color(grid[row, col]),
                )

        color = block_color(active_kind)
        for col, row in active_cells:
            if 0 <= row < self.field_height and 0 <= col < self.field_width:
                self._draw_cell(col * self.cell_size, row * self.cell_size, self.cell_size, color)

    def _draw_sidebar(self, next_kind: BlockKind, next_cells: list[tuple[int, int]]) -> None:
        """Draw the sidebar with the NEXT preview frame."""
        sidebar_x = self.board_pixel_width
        pygame.draw.rect(
            self.screen,
            SIDEBAR_BG_COLOR,
            (sidebar_x, 0, self.sidebar_width, self.window_height),
        )
        pygame.draw.line(
            self.screen,
            BORDER_COLOR,
            (sidebar_x, 0),
            (sidebar_x, self.window_height),
            2,
        )

        margin = 15
        box_x = sidebar_x + margin
        self._draw_text("NEXT", box_x, 20)

        box_y = 45
        preview_cell = self.cell_size * 2 // 3
        for row in range(self.preview_height):
            for col in range(self.preview_width):
                self._draw_cell(
                    box_x + col * preview_cell,
                    box_y + row * preview_cell,
                    preview_cell,
                    BLOCK_COLORS[BlockKind.NONE],
                )

        color = block_color(next_kind)
        for col, row in next_cells:
            if 0 <= row < self.preview_height and 0 <= col < self.preview_width:
                self._draw_cell(
                    box_x + col * preview_cell,
                    box_y + row * preview_cell,
                    preview_cell,
                    color,
                )

    def _draw_overlay(self, title: str, hint: str) -> None:
        """Draw a semi-transparent overlay with a title and a hint line."""
        overlay = pygame.Surface(
            (self.board_pixel_width, self.board_pixel_height), pygame.SRCALPHA
        )
        overlay.fill(OVERLAY_COLOR)
        self.screen.blit(overlay, (0, 0))

        text_title = self._large_font.render(title, True, (255, 50, 50))
        text_hint = self._font.render(hint, True, TEXT_COLOR)

        cx = self.board_pixel_width // 2
        cy = self.board_pixel_height // 2
        self.screen.blit(text_title, (cx - text_title.get_width() // 2, cy - 40))
        self.screen.blit(text_hint, (cx - text_hint.get_width() // 2, cy + 10))

    def _draw_text(self, text: str, x: int, y: int, color: tuple[int, int, int] = TEXT_COLOR) -> None:
        surface = self._font.render(text, True, color)
        self.screen.blit(surface, (x, y))

    def close(self) -> None:
        """Shut down Pygame and close the window."""
        if self._initialized:
            pygame.quit()
            self._initialized = False
