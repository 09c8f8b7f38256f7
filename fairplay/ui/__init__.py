"""
UI package for the Fairplay rotation engine.

This package contains the Flask web host exposing the engine as a JSON API.
"""
from .web_app import WebAppState, create_app, run_web_app

__all__ = ["WebAppState", "create_app", "run_web_app"]
