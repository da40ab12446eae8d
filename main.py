#!/usr/bin/env python3
"""
Trivia Quiz - Main Entry Point

Usage:
    python main.py                  # play on this terminal
    python main.py --serve          # accept remote players over TCP

Configuration:
    1. Edit config.json (server, quiz database, output and logging settings)
    2. Or set QUIZ_HOST, QUIZ_PORT and QUIZ_DATABASE environment variables
    3. Or pass --host, --port and --db on the command line
"""
import sys

from trivia_quiz.main import main

if __name__ == "__main__":
    sys.exit(main())
