"""Helper pod deployment for measurements that need an in-cluster probe.

The cluster client is an external collaborator; anything implementing
``ClusterClient`` (a thin wrapper over the Kubernetes API) can be used.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger("measurements.deploy")

POD_RUNNING = "Running"


class UpstreamUnavailableError(Exception):
    """The cluster API call failed."""


class AlreadyExistsError(Exception):
    """Raised by a ClusterClient when the object to create already exists."""


@runtime_checkable
class ClusterClient(Protocol):
    async def create_namespace(self, name: str) -> None: ...

    async def create_pod(self, namespace: str, manifest: dict[str, Any]) -> None: ...

    async def get_pod(self, namespace: str, name: str) -> dict[str, Any]: ...


def build_pod_manifest(
    namespace: str, pod_name: str, image: str, command: list[str]
) -> dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {"name": pod_name, "namespace": namespace},
        "spec": {
            "terminationGracePeriodSeconds": 0,
            "containers": [
                {
                    "name": pod_name,
                    "image": image,
                    "command": list(command),
                    "imagePullPolicy": "Always",
                    "securityContext": {
                        "allowPrivilegeEscalation": False,
                        "capabilities": {"drop": ["ALL"]},
                        "runAsNonRoot": True,
                        "seccompProfile": {"type": "RuntimeDefault"},
                        "runAsUser": 1000,
                    },
                }
            ],
        },
    }


async def _wait_for_running(
    client: ClusterClient, namespace: str, pod_name: str, interval: float
) -> None:
    while True:
        try:
            pod = await client.get_pod(namespace, pod_name)
        except Exception as exc:
            raise UpstreamUnavailableError(
                f"Error getting pod {namespace}/{pod_name}: {exc}"
            ) from exc
        if pod.get("status", {}).get("phase") == POD_RUNNING:
            return
        await asyncio.sleep(interval)


async def deploy_pod_in_namespace(
    client: ClusterClient,
    namespace: str,
    pod_name: str,
    image: str,
    command: list[str],
    *,
    interval: float = 0.1,
    timeout: float | None = None,
) -> None:
    """Create ``namespace`` and a restricted pod in it, then wait until it runs.

    Raises:
        UpstreamUnavailableError: A cluster API call failed.
        TimeoutError: The pod was not running within ``timeout`` seconds.
    """
    try:
        await client.create_namespace(namespace)
    except AlreadyExistsError:
        logger.debug("Namespace %s already exists", namespace)
    except Exception as exc:
        raise UpstreamUnavailableError(f"Error creating namespace {namespace}: {exc}") from exc

    manifest = build_pod_manifest(namespace, pod_name, image, command)
    try:
        await client.create_pod(namespace, manifest)
    except AlreadyExistsError as exc:
        logger.warning("%s", exc)
    except Exception as exc:
        raise UpstreamUnavailableError(
            f"Error creating pod {namespace}/{pod_name}: {exc}"
        ) from exc

    async with asyncio.timeout(timeout):
        await _wait_for_running(client, namespace, pod_name, interval)
    logger.info("Pod %s/%s is running", namespace, pod_name)
