"""
nano-creator - sports-analysis podcast studio.

Orchestrates Gemini calls for research, script writing, speech, B-roll
images and card news, with timeouts, retries and partial-failure handling.

Usage:
    from nano_creator import SessionController, StudioConfig
"""

from nano_creator.config.settings import StudioConfig
from nano_creator.services.session import SessionController

__version__ = "0.1.0"

__all__ = ["StudioConfig", "SessionController", "__version__"]
