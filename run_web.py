#!/usr/bin/env python3
"""
Main entry point for the Fairplay rotation web host.

This script launches the Flask-based JSON API server.
"""
import logging
import os

from fairplay.ui.web_app import run_web_app
from fairplay.utils import DEFAULT_HOST, DEFAULT_PORT

if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("FAIRPLAY_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_web_app(
        host=os.environ.get("FAIRPLAY_HOST", DEFAULT_HOST),
        port=int(os.environ.get("FAIRPLAY_PORT", DEFAULT_PORT)),
    )
