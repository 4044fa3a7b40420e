"""
Served application. Run with ``uvicorn subveris.asgi:app``.
"""
import logging

from subveris.core.config import settings
from subveris.main import create_app

logging.basicConfig(level=settings.LOG_LEVEL)

app = create_app()
