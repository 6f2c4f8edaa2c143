"""Default configuration values for drift processing and health scoring."""

DEFAULT_CONFIG_PATH = "drift.config.yaml"
DEFAULT_DRIFT_DIR = ".drift"
DEFAULT_IGNORE_FILE = "ignore.json"

# Aggregation
DEFAULT_AGGREGATION_STRATEGIES = ["value", "suggestion", "path", "entity"]
DEFAULT_MIN_GROUP_SIZE = 2
DEFAULT_PATH_PATTERNS: list = []

# Severity ordering (0 = lowest)
SEVERITY_ORDER = {
    "info": 0,
    "warning": 1,
    "critical": 2,
}

# Health score pillars
VALUE_DISCIPLINE_MAX = 60
TOKEN_HEALTH_MAX = 20
CONSISTENCY_MAX = 10
CRITICAL_ISSUES_MAX = 10

DEAD_CODE_WEIGHT = 0.3
TOTAL_DRIFT_WEIGHT = 0.5
SEVERE_DENSITY = 1.0
MODERATE_DENSITY = 0.3
TOKEN_COVERAGE_TARGET = 20
NAMING_RATE_FLOOR = 0.25
CRITICAL_PENALTY = 3
SMALL_SAMPLE_COMPONENTS = 3
SPACING_SPRAWL_LIMIT = 15
DEAD_CODE_SUGGESTION_MIN = 3
REPEATED_PATTERN_SUGGESTION_MIN = 3
UNUSED_TOKEN_SUGGESTION_PCT = 20
HIGH_DENSITY_FILE_SIGNALS = 10

HEALTH_TIERS = [
    (80, "Great"),
    (60, "Good"),
    (40, "OK"),
    (20, "Bad"),
]
HEALTH_TIER_FLOOR = "Terrible"
HEALTH_TIER_NONE = "N/A"

# Framework detection
UTILITY_FRAMEWORK_NAMES = ["tailwind", "styled-components", "emotion", "stitches"]
DS_LIBRARY_NAMES = [
    "mui", "chakra", "mantine", "ant-design", "radix",
    "headlessui", "fluentui", "nextui", "primereact",
    "ariakit", "vuetify", "element-plus", "naive-ui", "bootstrap",
]
# Libraries that ship their own styling system
DS_WITH_STYLING = ["chakra", "mantine", "mui"]

VENDORED_COMPONENT_FILES = {
    "accordion", "alert", "alert-dialog", "aspect-ratio", "avatar", "badge",
    "breadcrumb", "button", "calendar", "card", "carousel", "chart",
    "checkbox", "collapsible", "combobox", "command", "context-menu",
    "data-table", "date-picker", "dialog", "drawer", "dropdown-menu",
    "form", "hover-card", "input", "input-otp", "label", "menubar",
    "navigation-menu", "pagination", "popover", "progress", "radio-group",
    "resizable", "scroll-area", "select", "separator", "sheet", "sidebar",
    "skeleton", "slider", "sonner", "switch", "table", "tabs", "textarea",
    "toast", "toggle", "toggle-group", "tooltip",
}
COMPONENT_FILE_EXTENSIONS = [".tsx", ".jsx", ".vue", ".svelte"]
