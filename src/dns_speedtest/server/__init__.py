"""
HTTP API package for DNS Speed Test.

Streams benchmark progress and results as newline-delimited JSON.
"""

from .app import create_app, run_server

__all__ = ["create_app", "run_server"]
