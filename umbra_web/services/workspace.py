from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from umbra_web.domain.modules import ModuleSpec
from umbra_web.fixtures.base import FixtureProvider
from umbra_web.services.module_shell import ModuleShell
from umbra_web.services.scheduler import Scheduler


@dataclass
class Workspace:
    """
    The eight module shells of one browser session. Shells share nothing
    with each other; the workspace only routes to them and tears them down.
    """
    workspace_id: str
    shells: Dict[str, ModuleShell]

    @staticmethod
    def build(
        workspace_id: str,
        modules: Iterable[ModuleSpec],
        fixtures: Mapping[str, FixtureProvider],
        scheduler: Scheduler,
        latencies: Mapping[str, float],
    ) -> "Workspace":
        shells = {
            m.module_id: ModuleShell(
                module=m,
                fixtures=fixtures[m.module_id],
                scheduler=scheduler,
                latency_seconds=latencies.get(m.module_id, m.default_latency_seconds),
            )
            for m in modules
        }
        return Workspace(workspace_id=workspace_id, shells=shells)

    def shell(self, module_id: str) -> Optional[ModuleShell]:
        return self.shells.get(module_id)

    def module_ids(self) -> List[str]:
        return list(self.shells)

    def close(self) -> None:
        for shell in self.shells.values():
            shell.dispose()
