#!/usr/bin/env python3
"""
HomePoker - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload] [--log-level LEVEL]
"""

from homepoker.server.app import main


if __name__ == "__main__":
    main()
