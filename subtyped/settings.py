"""
Runtime settings for subtyped.

Only the CLI consumes these. The library itself never configures
logging handlers.
"""
import os


class AppSettings:
    """Application settings with environment variable support."""

    def __init__(self):
        self.log_level: str = os.getenv("SUBTYPED_LOG_LEVEL", "WARNING").upper()
        self.log_format: str = os.getenv(
            "SUBTYPED_LOG_FORMAT",
            "%(levelname)s %(name)s: %(message)s",
        )


settings = AppSettings()
