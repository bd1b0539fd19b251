# app/api/dependencies/normalizer.py
from app.core.clock import utc_now
from app.services.session_normalizer import SessionNormalizer


def get_session_normalizer() -> SessionNormalizer:
    """
    Dependency providing a SessionNormalizer bound to the wall clock.

    Tests override this dependency to inject a fixed clock.
    """
    return SessionNormalizer(clock=utc_now)
