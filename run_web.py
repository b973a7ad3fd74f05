#!/usr/bin/env python3
"""
Main entry point for the Courtside rotation web application.

This script configures logging and launches the Flask-based JSON API.
"""
import logging

from courtside.config import Settings
from courtside.ui.web_app import run_web_app

if __name__ == "__main__":
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    run_web_app(settings)
