"""Skip-trace response normalization and investigative session tracking."""

PARSER_VERSION = "2024.1"
