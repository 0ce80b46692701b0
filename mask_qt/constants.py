# mask_qt/constants.py
"""
Hằng số dùng chung cho trình vẽ mask
Bao gồm: kích thước hiển thị, debounce, màu preview, preset cọ, khóa QSettings
"""

# ========== DISPLAY - Kích thước vùng vẽ ==========
DEFAULT_DISPLAY_WIDTH = 512        # khi ảnh chưa load xong
DEFAULT_DISPLAY_HEIGHT = 512
MAX_DISPLAY_HEIGHT = 600           # px tuyệt đối
MAX_DISPLAY_HEIGHT_RATIO = 0.7     # so với chiều cao viewport

# ========== MASK ==========
MASK_DEBOUNCE_MS = 100
BINARIZE_THRESHOLD = 127           # kênh > 127 => "on"
CHANNEL_MAX = 255

# ========== BRUSH ==========
DEFAULT_BRUSH_RADIUS = 10
MIN_BRUSH_RADIUS = 1
MAX_BRUSH_RADIUS = 100
BRUSH_RADIUS_PRESETS = [3, 8, 15, 25, 50]

# ========== PREVIEW COLORS (r, g, b, a) ==========
PREVIEW_BLUE = (30, 144, 255, 178)
PREVIEW_RED = (255, 0, 0, 178)

# ========== SETTINGS ==========
ORGANIZATION_NAME = "MaskQt"
APPLICATION_NAME = "MaskEditor"
SETTINGS_BRUSH_RADIUS = "brush_radius"
SETTINGS_TOOL = "tool"
SETTINGS_ENCODING = "mask_encoding"
