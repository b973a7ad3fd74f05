"""
UI package for the Courtside rotation application.

This package contains the Flask JSON API.
"""
from .web_app import create_app, run_web_app, WebAppState

__all__ = ["create_app", "run_web_app", "WebAppState"]
