"""
Connect Four API entrypoint.

Run with: uvicorn src.main:app
"""

import logging

from src.api.app import create_app
from src.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app = create_app(settings)
