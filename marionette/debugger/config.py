"""Configuration constants for the Marionette debugger shell."""

# Default viewport dimensions (also used as argparse defaults).
DEFAULT_WIDTH = 1600
DEFAULT_HEIGHT = 900

# Height of the viewport menu bar (pixels). The panel workspace starts below it.
MENU_BAR_H = 20

# Panels snap their position and size to this grid (pixels).
GRID_SIZE = 20

# Panel header bar height (pixels); also the height of a collapsed panel.
PANEL_HEADER_H = 24

# Smallest size a panel can be resized to (pixels).
PANEL_MIN_W = 120
PANEL_MIN_H = 80

# Default panel sizes (pixels), (width, height).
GRAPH_PANEL_SIZE = (800, 600)
CLOCK_PANEL_SIZE = (200, 80)
LOG_PANEL_SIZE = (700, 300)

# New panels cascade from the top-left, offset by this much from the previous one (pixels).
PANEL_CASCADE_STEP = 40

# Duration (seconds) of each of the two stages of the panel close animation.
PANEL_CLOSE_STAGE_DURATION = 0.25

# Analysis host. The debugger posts JSON requests to `<HOST_URL>/api/<method>`.
HOST_URL = "http://127.0.0.1:5200"
HOST_TIMEOUT = 10.0  # seconds

# Graph view camera limits.
MIN_ZOOM = 0.1
MAX_ZOOM = 5.0
SCROLL_SENSITIVITY = 0.005

# Seconds after a pan ends during which a click does not select a vertex.
CLICK_SUPPRESS_DURATION = 0.2

# How many entries the host traffic log keeps.
LOG_MAX_ENTRIES = 1000

# Random seed for the placeholder listing shown in the vertices of the sample graph.
SAMPLE_CONTENT_SEED = 42
