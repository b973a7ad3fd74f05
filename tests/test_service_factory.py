import os
import tempfile
import unittest

from courtside.config import Settings
from courtside.services import (
    InMemoryRosterStore, JsonFileRosterStore, RestRosterStore, ServiceFactory
)


class ServiceFactoryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.roster_file = os.path.join(self.temp_dir.name, "roster.json")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_file_store_without_remote_settings(self) -> None:
        factory = ServiceFactory(Settings(roster_file=self.roster_file))

        store = factory.create_roster_store()
        self.assertIsInstance(store, JsonFileRosterStore)
        self.assertIs(factory.create_roster_store(), store)

    def test_incomplete_remote_settings_fall_back_to_file(self) -> None:
        factory = ServiceFactory(Settings(supabase_url="https://db.example.com", roster_file=self.roster_file))

        self.assertIsInstance(factory.create_roster_store(), JsonFileRosterStore)

    def test_remote_store_when_configured(self) -> None:
        factory = ServiceFactory(Settings(supabase_url="https://db.example.com", supabase_key="k"))

        self.assertIsInstance(factory.create_roster_store(), RestRosterStore)

    def test_suite_shares_dependencies(self) -> None:
        store = InMemoryRosterStore()
        factory = ServiceFactory(Settings(admin_password="pw"), store=store)
        services = factory.create_complete_service_suite(auto_tick=False)
        try:
            self.assertIs(services["store"], store)
            self.assertIs(services["orchestrator"].store, store)
            self.assertIs(services["roster"].persistence, services["persistence"])
            self.assertIs(services["orchestrator"].persistence, services["persistence"])
            self.assertIs(services["roster"].orchestrator, services["orchestrator"])
            self.assertTrue(services["roster"].admin_gate.configured)
        finally:
            services["orchestrator"].shutdown()


if __name__ == "__main__":
    unittest.main()
