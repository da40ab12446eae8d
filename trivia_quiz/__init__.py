"""
Trivia Quiz: an interactive question/answer game for terminals and TCP clients.
"""

__version__ = "1.0.0"
