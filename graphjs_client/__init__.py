from graphjs_client.config import AppSettings, ConfigurationError
from graphjs_client.core import ApiClientCore
from graphjs_client.models import Envelope, FeedType
from graphjs_client.services import GraphJsService, build_service
from graphjs_client.session import SessionManager, SessionState

__all__ = [
    "ApiClientCore",
    "AppSettings",
    "ConfigurationError",
    "Envelope",
    "FeedType",
    "GraphJsService",
    "SessionManager",
    "SessionState",
    "build_service",
]
