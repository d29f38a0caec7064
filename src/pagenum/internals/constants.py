"""Application-wide constants and configuration values."""

# Location of the slide parts inside a pptx package, and the filename pattern we number.
SLIDES_DIR = "ppt/slides/"
SLIDE_FILENAME_PATTERN = r"slide[0-9]+\.xml"

# Closing markers we insert the page number shape in front of, tried in this order.
SHAPE_TREE_CLOSE = "</p:spTree>"
COMMON_SLIDE_DATA_CLOSE = "</p:cSld>"

# Shape ids are this prefix followed by the slide index, e.g. "1001" for slide 1.
SHAPE_ID_PREFIX = "100"
SHAPE_NAME_PREFIX = "SlideNumber"

# Default page number box, in EMUs. Fixed position near the bottom right of a 4:3 / 16:9 slide.
DEFAULT_OFFSET_X = 8128000
DEFAULT_OFFSET_Y = 6096000
DEFAULT_WIDTH = 914400
DEFAULT_HEIGHT = 365760

# Default run formatting. font size is in hundredths of a point.
DEFAULT_FONT_SIZE = 1200
DEFAULT_TYPEFACE = "Arial"
DEFAULT_COLOR = "000000"

# Progress percentages reported at each stage boundary.
PROGRESS_OPENING = 10
PROGRESS_EXTRACTING = 20
PROGRESS_LOCATING = 40
PROGRESS_NUMBERING = 50
PROGRESS_NUMBERING_SPAN = 30
PROGRESS_REPACKAGING = 80
PROGRESS_SAVING = 90
PROGRESS_DONE = 100

# Output filename suffix, combined with the input stem and a timestamp on save to prevent clobbering
OUTPUT_SUFFIX = "_numbered"

# Staging directory name prefix; a run id and random characters are appended per run.
STAGING_PREFIX = "pptx_temp_"

# Debug mode (trace log) when PAGENUM_DEBUG is unset or unreadable
DEBUG_MODE_DEFAULT = False
