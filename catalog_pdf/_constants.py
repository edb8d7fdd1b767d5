"""Common literal values used across catalog_pdf.

Page geometry and layout metrics are expressed in millimetres with the origin
in the top-left corner of an A4 page. Keeping them here lets the layout
engine, the outline command, and tests agree on the same numbers.

Examples
--------
>>> from catalog_pdf import _constants
>>> _constants.FILENAME_TEMPLATE.format(name="Spring_Menu", version="2.1")
'Spring_Menu_v2.1.pdf'
>>> _constants.PAGE_HEIGHT - _constants.BOTTOM_MARGIN
277.0
"""

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0

TOP_MARGIN = 20.0
LEFT_MARGIN = 20.0
RIGHT_MARGIN = 20.0
BOTTOM_MARGIN = 20.0

CATEGORY_RESERVE = 40.0
PRODUCT_RESERVE = 50.0
HEADING_ADVANCE = 15.0
DESCRIPTION_ADVANCE = 15.0
TITLE_ADVANCE = 10.0
IMAGE_SIZE = 30.0
IMAGE_GAP = 10.0
MIN_ROW_HEIGHT = 35.0
CATEGORY_MARGIN = 15.0
DESCRIPTION_LIMIT = 100
DESCRIPTION_LINES = 2

BADGE_WIDTH = 30.0
BADGE_HEIGHT = 8.0
BADGE_LABEL = "BEST SELLER"

NO_IMAGE_LABEL = "No Image"
IMAGE_FAILED_LABEL = "Image Failed"
COVER_FAILED_LABEL = "Cover Image Not Available"
ABOUT_FAILED_LABEL = "About Us Image Not Available"

DEFAULT_ABOUT_HEADING = "About Us"
DEFAULT_ABOUT_LINES = (
    "Welcome to our product catalog.",
    "We provide quality products and excellent service.",
)

FILENAME_TEMPLATE = "{name}_v{version}.pdf"
