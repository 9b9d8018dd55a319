from modules.auth.interfaces import ISessionStore
from modules.auth.service import SupabaseSessionStore

SESSION_METHODS = [
    "get_current_session",
    "on_session_change",
    "sign_in_with_password",
    "sign_up",
    "start_oauth",
    "exchange_auth_code",
    "set_session",
    "verify_recovery_code",
    "update_password",
    "request_password_reset",
    "sign_out",
]


class TestSessionStoreInterface:
    def test_interface_methods_exist(self):
        """ISessionStore should define required methods."""
        for method in SESSION_METHODS:
            assert hasattr(ISessionStore, method)

    def test_supabase_store_has_interface_methods(self):
        """SupabaseSessionStore should have all ISessionStore methods."""
        for method in SESSION_METHODS:
            assert callable(getattr(SupabaseSessionStore, method))

    def test_fake_store_satisfies_protocol(self, session_store):
        """The in-memory store used across tests must match the protocol."""
        assert isinstance(session_store, ISessionStore)
