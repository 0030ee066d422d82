import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials

from alumni_network.config import Settings


logger = logging.getLogger(__name__)


def init_firebase(settings: Settings) -> Optional[firebase_admin.App]:
    """Return the default Firebase app, initialising it on first use.

    Returns None when no credentials can be loaded; login then fails with a
    server error and push delivery stays disabled.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    try:
        if settings.firebase_credentials:
            cred = credentials.Certificate(settings.firebase_credentials)
            return firebase_admin.initialize_app(cred)
        return firebase_admin.initialize_app()
    except (ValueError, OSError) as exc:
        logger.warning("Firebase is not configured: %s", exc)
        return None
