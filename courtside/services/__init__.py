"""
Services package for the Courtside rotation application.

This package contains the scheduling algorithms, the round orchestrator and
the boundary services around them.
"""
from .skill_bands import SkillBandIndex
from .fairness_selector import FairnessSelector, Selection
from .group_former import GroupFormer, GroupingOutcome
from .team_balancer import TeamBalancer
from .round_timer import RoundTimer, TickerThread, TimerEvent
from .roster_store import (
    RosterStore, InMemoryRosterStore, JsonFileRosterStore, RestRosterStore,
    UpdateRecord, StoreResult, normalize_update
)
from .persistence_service import PersistenceService, BatchWriteReport
from .admin_gate import AdminGate
from .tone_emitter import ToneEmitter, LoggingToneEmitter, NullToneEmitter
from .round_orchestrator import RoundOrchestrator, OrchestratorState
from .roster_service import RosterService
from .analytics_service import SessionAnalyticsService, SessionReportExporter
from .service_factory import ServiceFactory

__all__ = [
    "SkillBandIndex", "FairnessSelector", "Selection", "GroupFormer", "GroupingOutcome",
    "TeamBalancer", "RoundTimer", "TickerThread", "TimerEvent",
    "RosterStore", "InMemoryRosterStore", "JsonFileRosterStore", "RestRosterStore",
    "UpdateRecord", "StoreResult", "normalize_update",
    "PersistenceService", "BatchWriteReport", "AdminGate",
    "ToneEmitter", "LoggingToneEmitter", "NullToneEmitter",
    "RoundOrchestrator", "OrchestratorState", "RosterService",
    "SessionAnalyticsService", "SessionReportExporter", "ServiceFactory"
]
