from __future__ import annotations

import atexit
import logging
import weakref
from typing import Dict, Optional

from flask import Flask

from umbra_web.config import AppSettings, IniConfig
from umbra_web.domain.modules import MODULES
from umbra_web.fixtures import FixtureProvider, default_fixture_providers
from umbra_web.repositories.workspace_repository import WorkspaceRepository
from umbra_web.services.scheduler import Scheduler, ThreadingTimerScheduler
from umbra_web.services.workspace import Workspace
from umbra_web.web.routes import create_blueprint

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# repositories of every app still alive; closed once at interpreter exit
_LIVE_WORKSPACES: "weakref.WeakSet[WorkspaceRepository]" = weakref.WeakSet()


def _close_live_workspaces() -> None:
    # outstanding completions must not fire into torn-down workspaces
    for repo in list(_LIVE_WORKSPACES):
        repo.close_all()


atexit.register(_close_live_workspaces)


def _configure_logging(app: Flask, settings: AppSettings) -> None:
    logging.basicConfig(level=settings.log_level_value, format=LOG_FORMAT)
    logging.getLogger("umbra_web").setLevel(settings.log_level_value)
    app.logger.setLevel(settings.log_level_value)


def create_app(
    settings: Optional[AppSettings] = None,
    scheduler: Optional[Scheduler] = None,
    fixtures: Optional[Dict[str, FixtureProvider]] = None,
) -> Flask:
    if settings is None:
        settings = IniConfig.from_env_or_default().load_settings()

    scheduler = scheduler or ThreadingTimerScheduler()
    providers = default_fixture_providers()
    providers.update(fixtures or {})
    latencies = {m.module_id: settings.latency_for(m.module_id) for m in MODULES}

    workspaces = WorkspaceRepository(
        factory=lambda workspace_id: Workspace.build(
            workspace_id,
            modules=MODULES,
            fixtures=providers,
            scheduler=scheduler,
            latencies=latencies,
        ),
        idle_timeout_seconds=settings.workspace_idle_timeout_seconds,
        max_workspaces=settings.max_workspaces,
    )
    _LIVE_WORKSPACES.add(workspaces)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.register_blueprint(create_blueprint(workspaces, settings))

    app.config["HOST"] = settings.flask_host
    app.config["PORT"] = settings.flask_port
    app.config["DEBUG"] = settings.flask_debug
    app.extensions["umbra_workspaces"] = workspaces

    _configure_logging(app, settings)

    app.logger.info("UMBRA ready: %d modules, default=%s", len(MODULES), settings.default_module)
    return app
