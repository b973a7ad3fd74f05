"""
Service Factory for dependency injection.

This module wires the roster store, writer, orchestrator and roster service
together from :class:`~courtside.config.Settings`.
"""
import logging
from typing import Dict, Optional

from ..config import Settings
from ..errors import ConfigurationError
from ..models import SessionConfig
from .admin_gate import AdminGate
from .analytics_service import SessionAnalyticsService, SessionReportExporter
from .persistence_service import PersistenceService
from .roster_service import RosterService
from .roster_store import JsonFileRosterStore, RestRosterStore, RosterStore
from .round_orchestrator import RoundOrchestrator
from .tone_emitter import LoggingToneEmitter, ToneEmitter

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for creating service instances with their dependencies injected.

    The roster store and writer are created once and shared by every service.
    """

    def __init__(self, settings: Optional[Settings] = None, store: Optional[RosterStore] = None):
        """Initialize factory with settings and an optional ready-made store."""
        self.settings = settings or Settings.from_env()
        self._store = store
        self._persistence_service: Optional[PersistenceService] = None
        self._export_service: Optional[SessionReportExporter] = None

    def create_roster_store(self) -> RosterStore:
        """
        Create the configured roster store.

        A remote store is used when Supabase settings are present. If they are
        incomplete the configuration error is logged and the JSON file store
        is used so scheduling still works.
        """
        if self._store is not None:
            return self._store

        if self.settings.remote_store_configured:
            try:
                self._store = RestRosterStore(self.settings.supabase_url, self.settings.supabase_key)
                logger.info("Using remote roster store at %s", self.settings.supabase_url)
                return self._store
            except ConfigurationError as e:
                logger.error("Remote roster store unavailable: %s", e)

        logger.info("Using roster file %s", self.settings.roster_file)
        self._store = JsonFileRosterStore(self.settings.roster_file)
        return self._store

    def create_orchestrator(
        self,
        config: Optional[SessionConfig] = None,
        tone_emitter: Optional[ToneEmitter] = None,
        auto_tick: bool = True,
    ) -> RoundOrchestrator:
        return RoundOrchestrator(
            store=self.create_roster_store(),
            config=config or SessionConfig(),
            persistence=self._get_persistence_service(),
            tone_emitter=tone_emitter or LoggingToneEmitter(),
            auto_tick=auto_tick,
        )

    def create_roster_service(self, orchestrator: Optional[RoundOrchestrator] = None) -> RosterService:
        return RosterService(
            store=self.create_roster_store(),
            admin_gate=AdminGate(self.settings.admin_password),
            persistence=self._get_persistence_service(),
            orchestrator=orchestrator,
        )

    def create_analytics_service(self, orchestrator: RoundOrchestrator) -> SessionAnalyticsService:
        return SessionAnalyticsService(orchestrator.session, export_service=self._get_export_service())

    def create_complete_service_suite(self, config: Optional[SessionConfig] = None, auto_tick: bool = True) -> Dict[str, object]:
        """
        Create a complete suite of services with shared dependencies.

        Returns:
            Dictionary containing all configured services
        """
        orchestrator = self.create_orchestrator(config=config, auto_tick=auto_tick)
        return {
            "store": self.create_roster_store(),
            "orchestrator": orchestrator,
            "roster": self.create_roster_service(orchestrator),
            "persistence": self._get_persistence_service(),
        }

    def _get_persistence_service(self) -> PersistenceService:
        """Get singleton persistence service."""
        if self._persistence_service is None:
            self._persistence_service = PersistenceService(self.create_roster_store())
        return self._persistence_service

    def _get_export_service(self) -> SessionReportExporter:
        """Get singleton export service."""
        if self._export_service is None:
            self._export_service = SessionReportExporter()
        return self._export_service
