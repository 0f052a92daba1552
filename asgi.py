"""
asgi.py -- Application assembly for TaskReview.

Run with:  uvicorn asgi:app --reload
           python main.py
"""

from api.main import app  # noqa: F401
