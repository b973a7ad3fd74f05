"""
Models package for the Courtside rotation application.

This package contains the core data models used throughout the application.
"""
from .player import Player
from .match import Match, Round, RoundMeta
from .session_config import SessionConfig, GroupingMode
from .session_state import SessionState, pair_key
from .session_report import SessionReport, PlayerFairnessSummary, RoundDiagnostics

__all__ = [
    "Player", "Match", "Round", "RoundMeta", "SessionConfig", "GroupingMode",
    "SessionState", "pair_key", "SessionReport", "PlayerFairnessSummary", "RoundDiagnostics"
]
