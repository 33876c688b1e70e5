"""MCP tool definitions. Pushes painting commands onto a thread-safe queue.

The pygame main thread owns the Canvas and drains the queue, so every engine
call happens on that one thread no matter how many tool calls arrive.
"""

import json
import logging
import queue
import threading
from typing import Optional

from mcp.server.fastmcp import FastMCP

from brush import BRUSH_SIZES

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 5.0


def request_response(command_queue: queue.Queue, cmd: dict, timeout: float = REQUEST_TIMEOUT):
    """Send a command to the main thread and wait for a response."""
    event = threading.Event()
    result: dict = {}
    cmd["_event"] = event
    cmd["_result"] = result
    command_queue.put(cmd)
    if not event.wait(timeout):
        raise TimeoutError("Main thread did not respond in time")
    if "error" in result:
        raise RuntimeError(result["error"])
    return result.get("data")


def serve_request(cmd: dict, canvas) -> None:
    """Run a queued request on the main thread and wake the waiting tool call."""
    event: threading.Event = cmd["_event"]
    result: dict = cmd["_result"]
    try:
        result["data"] = canvas.execute(cmd)
    except Exception as e:
        logger.warning("Command %s failed: %s", cmd.get("action"), e)
        result["error"] = str(e)
    finally:
        event.set()


def create_mcp_server(command_queue: queue.Queue) -> FastMCP:
    mcp = FastMCP("joy-of-painting")

    def _send(cmd: dict):
        return request_response(command_queue, cmd)

    @mcp.tool()
    def get_canvas_info() -> str:
        """Get grid size, current brush settings, and undo depth."""
        return json.dumps(_send({"action": "get_info"}))

    @mcp.tool()
    def set_color(color: str) -> str:
        """Set the brush color, as '#RRGGBB' or a palette name such as 'Red'."""
        return f"Color set to {_send({'action': 'set_color', 'color': color})}"

    @mcp.tool()
    def set_brush(size: Optional[str] = None, pattern: Optional[str] = None) -> str:
        """Select a brush by size name (Tiny, Small, Medium, Large) or a custom pattern.

        A pattern is a square grid of characters: '0' paints, 'X' paints and
        marks the cell under the pointer, '_' is a hole. Whitespace is ignored.
        """
        if pattern is None and size is None:
            return f"Give a pattern or one of: {', '.join(BRUSH_SIZES)}"
        cmd: dict = {"action": "set_brush"}
        if pattern is not None:
            cmd["pattern"] = pattern
        else:
            cmd["size"] = size
        info = _send(cmd)
        message = f"Brush set: {info['cells']} cells on a {info['side']}x{info['side']} pattern"
        if info["warning"]:
            message += f" (warning: {info['warning']})"
        return message

    @mcp.tool()
    def set_opacity(opacity: float) -> str:
        """Set brush opacity, greater than 0 and at most 1."""
        return f"Opacity set to {_send({'action': 'set_opacity', 'opacity': opacity})}"

    @mcp.tool()
    def begin_stroke(col: int, row: int) -> str:
        """Press the brush down at grid cell (col, row)."""
        cells = _send({"action": "begin_stroke", "col": col, "row": row})
        if cells is None:
            return "Ignored: a stroke is already active"
        return f"Stroke started at ({col}, {row}), previewing {len(cells)} cells"

    @mcp.tool()
    def move_stroke(col: int, row: int) -> str:
        """Drag the active stroke to grid cell (col, row)."""
        cells = _send({"action": "move_stroke", "col": col, "row": row})
        if cells is None:
            return "Ignored: no active stroke"
        return f"Stroke moved to ({col}, {row}), previewing {len(cells)} cells"

    @mcp.tool()
    def end_stroke() -> str:
        """Release the brush and commit the stroke. Returns the modified cells."""
        return json.dumps(_send({"action": "end_stroke"}))

    @mcp.tool()
    def paint_stroke(points: list[list[int]]) -> str:
        """Paint a whole stroke through a list of [col, row] cells."""
        return json.dumps(_send({"action": "paint_stroke", "points": points}))

    @mcp.tool()
    def undo() -> str:
        """Undo the last stroke."""
        return "Undo performed" if _send({"action": "undo"}) else "Nothing to undo"

    @mcp.tool()
    def get_cell(col: int, row: int) -> str:
        """Return the committed color of one cell as '#RRGGBB'."""
        return _send({"action": "get_cell", "col": col, "row": row})

    @mcp.tool()
    def get_canvas_pixels(x: Optional[int] = None, y: Optional[int] = None,
                          width: Optional[int] = None, height: Optional[int] = None) -> str:
        """Return RGB data as a JSON 2D array of [r,g,b] values (row-major).

        Omit the parameters to get the full grid.
        """
        cmd: dict = {"action": "get_pixels"}
        if x is not None:
            cmd["x"] = x
        if y is not None:
            cmd["y"] = y
        if width is not None:
            cmd["w"] = width
        if height is not None:
            cmd["h"] = height
        return json.dumps(_send(cmd))

    return mcp
