"""
Shared constants for site antidote.

Contains the asset classification tables and HTTP defaults.
"""

# Default user agent string for page and asset requests
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Extension patterns per asset class. Patterns are regular expressions
# searched anywhere in the reference, so '.' matches any character.
STYLE_EXTENSIONS = (".css",)

SCRIPT_EXTENSIONS = (".js",)

IMAGE_EXTENSIONS = frozenset({
    ".JPEG", ".jpeg",
    ".JPG", ".jpg",
    ".GIF", ".gif",
    ".PNG", ".png",
    ".BMP", ".bmp",
    ".TIFF", ".tiff",
})

# data:image/<subtype>;base64,<payload>
DATA_URL_TEMPLATE = "data:image/{subtype};base64,{payload}"
