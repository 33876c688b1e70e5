"""Entry point: starts MCP server thread + pygame main loop."""

import os
# Suppress pygame welcome message before importing — it prints to stdout
# which would corrupt the MCP stdio JSON-RPC stream.
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "1"

import logging
import queue
import threading

import numpy as np
import pygame

from brush import BRUSH_SIZES
from canvas import Canvas
from color import PALETTE
from logging_config import configure_logging
from pointer import pointer_to_cell
from settings import FPS, GRID_SIZE, LOG_JSON, LOG_LEVEL, PIXEL_SIZE
from tools import create_mcp_server, serve_request

logger = logging.getLogger(__name__)

CANVAS_SIZE = PIXEL_SIZE * GRID_SIZE
TOOLBAR_H = 40
PALETTE_COLUMNS = 8
SWATCH = 40
SWATCH_GAP = 8
PALETTE_H = 2 * (SWATCH + SWATCH_GAP) + SWATCH_GAP
WIDTH = max(CANVAS_SIZE, PALETTE_COLUMNS * (SWATCH + SWATCH_GAP) + SWATCH_GAP, 380)
WINDOW_H = TOOLBAR_H + CANVAS_SIZE + PALETTE_H
OPACITIES = (1.0, 0.75, 0.5, 0.25)

# Toolbar colours
TB_BG = (220, 220, 220)
TB_BTN = (180, 180, 180)
TB_BTN_ACTIVE = (120, 120, 120)
TB_TEXT = (30, 30, 30)
PALETTE_BG = (222, 184, 135)  # burlywood
HOVER_OUTLINE = (0, 0, 0)


def run_mcp_server(mcp_server):
    """Target for the daemon thread — runs the MCP stdio server."""
    mcp_server.run(transport="stdio")


def _build_buttons() -> list[tuple[pygame.Rect, dict, str]]:
    """Toolbar and palette hit-boxes, each paired with the command it issues."""
    buttons = []
    x = 8
    for name in BRUSH_SIZES:
        buttons.append((pygame.Rect(x, 7, 30, 26), {"action": "set_brush", "size": name}, name[0]))
        x += 34
    x += 10
    for opacity in OPACITIES:
        buttons.append((pygame.Rect(x, 7, 40, 26), {"action": "set_opacity", "opacity": opacity},
                        f"{int(opacity * 100)}%"))
        x += 44
    x += 10
    buttons.append((pygame.Rect(x, 7, 54, 26), {"action": "undo"}, "Undo"))

    top = TOOLBAR_H + CANVAS_SIZE + SWATCH_GAP
    for index, color in enumerate(PALETTE.values()):
        row, col = divmod(index, PALETTE_COLUMNS)
        rect = pygame.Rect(SWATCH_GAP + col * (SWATCH + SWATCH_GAP),
                           top + row * (SWATCH + SWATCH_GAP), SWATCH, SWATCH)
        buttons.append((rect, {"action": "set_color", "color": color.hex}, ""))
    return buttons


def _is_selected(cmd: dict, canvas: Canvas) -> bool:
    action = cmd["action"]
    if action == "set_brush":
        return canvas.state.pattern == BRUSH_SIZES[cmd["size"]]
    if action == "set_opacity":
        return canvas.state.opacity == cmd["opacity"]
    if action == "set_color":
        return canvas.state.color.hex == cmd["color"]
    return False


def _grid_surface(canvas: Canvas) -> pygame.Surface:
    # composite() is row-major (H, W, 3); surfarray wants (W, H, 3)
    pixels = np.ascontiguousarray(np.transpose(canvas.composite(), (1, 0, 2)))
    surface = pygame.surfarray.make_surface(pixels)
    return pygame.transform.scale(surface, (CANVAS_SIZE, CANVAS_SIZE))


def _button_at(buttons, pos):
    return next((cmd for rect, cmd, _ in buttons if rect.collidepoint(pos)), None)


def _cell_at(pos):
    return pointer_to_cell(pos[0], pos[1] - TOOLBAR_H, PIXEL_SIZE, GRID_SIZE)


def _run_command(cmd: dict, canvas: Canvas):
    try:
        canvas.execute(cmd)
    except Exception as e:
        logger.error("Command error: %s", e)


def main():
    configure_logging(json_format=LOG_JSON, log_level=LOG_LEVEL)

    # Shared command queue between MCP thread and pygame main thread
    command_queue = queue.Queue()

    # Create MCP server with tool definitions
    mcp_server = create_mcp_server(command_queue)

    # Start MCP server in a background daemon thread
    mcp_thread = threading.Thread(target=run_mcp_server, args=(mcp_server,), daemon=True)
    mcp_thread.start()

    # Initialize pygame on the main thread
    pygame.init()
    screen = pygame.display.set_mode((WIDTH, WINDOW_H))
    pygame.display.set_caption("Joy of Painting")
    clock = pygame.time.Clock()

    canvas = Canvas(GRID_SIZE)
    canvas_rect = pygame.Rect(0, TOOLBAR_H, CANVAS_SIZE, CANVAS_SIZE)
    buttons = _build_buttons()
    font = pygame.font.SysFont(None, 20)

    hover = None
    mouse_down = False
    finger = None  # only the first touch contact paints

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif getattr(event, "touch", False):
                continue  # synthesized from touch, handled via FINGER events
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                clicked = _button_at(buttons, event.pos)
                if clicked is not None:
                    _run_command(clicked, canvas)
                elif canvas_rect.collidepoint(event.pos):
                    cell = _cell_at(event.pos)
                    mouse_down = canvas.begin_stroke(cell.col, cell.row) is not None
            elif event.type == pygame.MOUSEMOTION:
                cell = _cell_at(event.pos)
                hover = cell if cell.in_bounds else None
                if mouse_down:
                    canvas.move_stroke(cell.col, cell.row)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if mouse_down:
                    canvas.end_stroke()
                mouse_down = False
            elif event.type == pygame.WINDOWLEAVE:
                hover = None
            elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
                pos = (event.x * WIDTH, event.y * WINDOW_H)
                cell = _cell_at(pos)
                if event.type == pygame.FINGERDOWN and finger is None:
                    clicked = _button_at(buttons, pos)
                    if clicked is not None:
                        _run_command(clicked, canvas)
                    elif cell.in_bounds and canvas.begin_stroke(cell.col, cell.row) is not None:
                        finger = event.finger_id
                elif event.finger_id == finger:
                    if event.type == pygame.FINGERMOTION:
                        canvas.move_stroke(cell.col, cell.row)
                    else:
                        canvas.end_stroke()
                        finger = None
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_z and event.mod & pygame.KMOD_CTRL:
                canvas.undo()

        # Drain all pending requests from the MCP thread
        while True:
            try:
                cmd = command_queue.get_nowait()
            except queue.Empty:
                break
            serve_request(cmd, canvas)

        # --- Render ---
        screen.fill(TB_BG)
        screen.blit(_grid_surface(canvas), canvas_rect.topleft)
        if hover is not None and not canvas.stroke.active:
            outline = pygame.Rect(hover.col * PIXEL_SIZE, TOOLBAR_H + hover.row * PIXEL_SIZE,
                                  PIXEL_SIZE, PIXEL_SIZE)
            pygame.draw.rect(screen, HOVER_OUTLINE, outline, width=1)

        pygame.draw.rect(screen, PALETTE_BG,
                         (0, TOOLBAR_H + CANVAS_SIZE, WIDTH, PALETTE_H),
                         border_top_left_radius=40, border_top_right_radius=10)
        for rect, cmd, label in buttons:
            selected = _is_selected(cmd, canvas)
            if cmd["action"] == "set_color":
                pygame.draw.rect(screen, cmd["color"], rect, border_radius=6)
                if selected:
                    pygame.draw.rect(screen, TB_TEXT, rect, width=2, border_radius=6)
                continue
            pygame.draw.rect(screen, TB_BTN_ACTIVE if selected else TB_BTN, rect, border_radius=4)
            pygame.draw.rect(screen, TB_TEXT, rect, width=1, border_radius=4)
            text = font.render(label, True, TB_TEXT)
            screen.blit(text, text.get_rect(center=rect.center))

        pygame.display.flip()
        clock.tick(FPS)

    pygame.quit()


if __name__ == "__main__":
    main()
