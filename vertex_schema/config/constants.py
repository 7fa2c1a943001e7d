"""Configuration constants for the schema converters."""

# Vertex `format` values understood by the converters
FORMAT_DATE = "date"
FORMAT_DATE_TIME = "date-time"

# Refinement names recorded on source nodes
CHECK_DATE = "date"
CHECK_DATE_TIME = "date-time"
CHECK_INT = "int"
CHECK_MIN = "min"
CHECK_MAX = "max"
CHECK_MIN_LENGTH = "min_length"
CHECK_MAX_LENGTH = "max_length"
CHECK_REGEX = "regex"
CHECK_MULTIPLE_OF = "multiple_of"

# pydantic general-metadata keys that get a friendlier check name
METADATA_CHECK_NAMES = {
    "pattern": CHECK_REGEX,
}

# Model name used for the top-level object built by the reverse converter
DEFAULT_MODEL_NAME = "VertexModel"
DEFAULT_ENUM_NAME = "DynamicEnum"

# Logging defaults, overridable through the environment
DEFAULT_LOG_LEVEL = "INFO"
LOG_FILE_NAME = "vertex-schema.log"
