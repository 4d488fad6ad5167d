"""
Calendar Assistant API module.

Hosts the OAuth callback and health endpoints and runs the bot.
"""

from src.api.main import app, run_server

__all__ = ["app", "run_server"]
