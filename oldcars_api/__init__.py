"""
Top‑level package for the Old Cars API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``oldcars_api.app.main:app``.
"""

__all__ = []
