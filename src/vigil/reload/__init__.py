"""Live-reload feature for FastAPI apps.

Usage:
    app = FastAPI()
    attach_vigil(app, load_config(project_root="."))

    # HTML pages then include:
    #   <script src="/vigil/inject.js"></script>
"""

from vigil.reload.gateway import attach_vigil, is_active
from vigil.reload.runtime import VigilRuntime, create_runtime
from vigil.reload.session import ReloadSession, SessionState
from vigil.reload.websocket import ConnectionManager

__all__ = [
    "attach_vigil",
    "is_active",
    "create_runtime",
    "VigilRuntime",
    "ReloadSession",
    "SessionState",
    "ConnectionManager",
]
