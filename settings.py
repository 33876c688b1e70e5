import os

GRID_SIZE = int(os.getenv("PAINT_GRID_SIZE", "32"))
PIXEL_SIZE = int(os.getenv("PAINT_PIXEL_SIZE", "12"))  # screen pixels per grid cell
HISTORY_CAPACITY = int(os.getenv("PAINT_HISTORY_CAPACITY", "10"))
FPS = int(os.getenv("PAINT_FPS", "30"))
LOG_LEVEL = os.getenv("PAINT_LOG_LEVEL", "INFO").upper()
LOG_JSON = os.getenv("PAINT_LOG_JSON", "false").lower() == "true"
