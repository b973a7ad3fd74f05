"""
Courtside Rotation

Timed rotation rounds for multi-court doubles sessions: fair bench
selection, skill grouping, balanced teams and a round timer that advances
the session on its own.

This package provides the scheduling core and a Flask JSON API around it.
"""
from .models import Player, Match, Round, SessionConfig, SessionState, GroupingMode
from .services import (
    FairnessSelector, GroupFormer, TeamBalancer, RoundOrchestrator, ServiceFactory
)
from .utils import fmt_mmss, now_ts, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Player", "Match", "Round", "SessionConfig", "SessionState", "GroupingMode",
    "FairnessSelector", "GroupFormer", "TeamBalancer", "RoundOrchestrator", "ServiceFactory",
    "fmt_mmss", "now_ts", "APP_TITLE"
]
