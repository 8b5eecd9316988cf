"""Deployment context threaded through webhook builders instead of global env reads."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

DEFAULT_ALLOWED_ENVS: tuple[str, ...] = ("development",)


@dataclass(frozen=True)
class DeploymentContext:
    """Named execution context the process runs in.

    ``environment`` is the deployment environment name (``development``,
    ``preview``, ``production``), ``url`` the host the platform assigned to this
    deployment, and ``edge_runtime`` whether the process runs on an
    edge-constrained host with no signal handling.
    """

    environment: str | None = None
    url: str | None = None
    edge_runtime: bool = False

    def allows(self, allowed_envs: Iterable[str] = DEFAULT_ALLOWED_ENVS) -> bool:
        """Return whether the current environment is present in the allowlist."""

        if self.environment is None:
            return False
        return self.environment in set(allowed_envs)
