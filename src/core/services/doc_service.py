"""Documentation website deployments."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from adapters.sideko_api import SidekoClient
from core.domain.models import Deployment, DeploymentStatus, DeploymentTarget
from core.errors import ApiError


logger = logging.getLogger(__name__)


@dataclass
class DeployHooks:
    """Optional callbacks for UI layers."""

    status: Callable[[Deployment], None] | None = None


async def deploy(
    *,
    client: SidekoClient,
    doc_name: str,
    prod: bool = False,
    no_wait: bool = False,
    poll_interval: float = 2.0,
    timeout: float = 600.0,
    hooks: DeployHooks | None = None,
) -> Deployment:
    """Trigger a deployment and, unless `no_wait`, poll until it finishes."""

    hooks = hooks or DeployHooks()
    target = DeploymentTarget.PRODUCTION if prod else DeploymentTarget.PREVIEW

    deployment = await client.trigger_deployment(doc_name=doc_name, target=target)
    logger.debug("Triggered %s deployment %s for %s", target.value, deployment.id, doc_name)
    if hooks.status:
        hooks.status(deployment)
    if no_wait:
        return deployment

    deadline = time.monotonic() + timeout
    last_status = deployment.status
    while not deployment.status.is_terminal():
        if time.monotonic() >= deadline:
            raise ApiError(
                f"Timed out waiting for deployment {deployment.id} to complete",
                debug=f"last status: {deployment.status.value}",
            )
        await asyncio.sleep(poll_interval)
        deployment = await client.get_deployment(doc_name=doc_name, deployment_id=deployment.id)
        if deployment.status is not last_status:
            logger.debug("Deployment %s is %s", deployment.id, deployment.status.value)
            last_status = deployment.status
            if hooks.status:
                hooks.status(deployment)

    if deployment.status is not DeploymentStatus.COMPLETE:
        raise ApiError(f"Deployment {deployment.id} finished with status {deployment.status.value}")
    return deployment
