"""All magic numbers and configuration constants."""

SNAP_THRESHOLD_SEC = 0.25           # seconds: snap a dragged edge onto a neighbor within this distance
SEGMENT_MIN_WIDTH = 1.0             # seconds: shortest chapter
SUB_SEGMENT_MIN_WIDTH = 0.1         # seconds: shortest speaker interval
NORMALIZE_MIN_WIDTH = 0.5           # seconds: width floor when relocating ingested speakers
NEW_SEGMENT_DURATION = 60.0         # seconds: length of a freshly added chapter
SUB_SEGMENT_DURATION = 30.0         # seconds: length of each freshly added speaker
DEFAULT_DURATION_SEC = 36000.0      # seconds: timeline length when chapters end earlier (10h)
NEW_SEGMENT_TITLE = "New chapter"
DEFAULT_CATEGORY = "executives"

DEFAULT_SCALE = 5.0                 # px per second
MIN_SCALE = 0.2
MAX_SCALE = 80.0
ZOOM_STEP = 1.2                     # factor applied by one zoom in/out
TICK_CANDIDATES = (1, 2, 5, 10, 30, 60, 120, 300, 600, 1800, 3600)  # seconds
TICK_MIN_PX = 80                    # minimum spacing between ruler ticks
VISIBLE_BUFFER_SEC = 10.0           # render margin on both sides of the viewport
INITIAL_VISIBLE_SEC = 120.0         # window used before the viewport is measured
FOLLOW_MARGIN_PX = 120              # leading space kept ahead of the playhead

OVERLAP_WARNING = "Overlapping timecodes detected from backend. Adjusted layout locally."
OUTPUT_DIR = "output"
VERSION = "0.1.0"
