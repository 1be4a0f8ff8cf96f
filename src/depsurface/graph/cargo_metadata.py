"""Load a DependencyGraph from ``cargo metadata`` output.

Resolution itself is Cargo's job; this module only runs
``cargo metadata --format-version 1`` (or reads a saved copy) and turns the
``packages``, ``workspace_members`` and ``resolve`` sections into a graph.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any, Optional

from ..exceptions import GraphLoadError
from ..logging_config import get_logger
from .builder import build_dependency_graph
from .models import DependencyGraph, PackageId, PackageNode

logger = get_logger(__name__)

_BUILD_SCRIPT_KIND = "custom-build"


def run_cargo_metadata(
    project_dir: Path,
    timeout: Optional[int] = 120,
    cargo: str = "cargo",
) -> dict[str, Any]:
    """Run ``cargo metadata`` in ``project_dir`` and return the parsed JSON.

    Raises:
        GraphLoadError: If cargo is missing, fails, times out or prints
            something that is not JSON.
    """
    project_dir = Path(project_dir).resolve()
    cmd = [cargo, "metadata", "--format-version", "1"]
    logger.info("Resolving dependency graph in %s", project_dir)
    try:
        result = subprocess.run(
            cmd,
            cwd=str(project_dir),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise GraphLoadError(str(project_dir), f"{cargo} not found") from e
    except subprocess.TimeoutExpired as e:
        raise GraphLoadError(str(project_dir), f"cargo metadata timed out after {timeout}s") from e

    if result.returncode != 0:
        raise GraphLoadError(
            str(project_dir),
            result.stderr.strip() or f"cargo metadata exited with {result.returncode}",
        )

    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise GraphLoadError(str(project_dir), f"unparsable cargo metadata output: {e}") from e


def load_cargo_metadata_file(path: Path) -> dict[str, Any]:
    """Read a saved ``cargo metadata`` JSON document."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)
    except OSError as e:
        raise GraphLoadError(str(path), str(e)) from e
    except json.JSONDecodeError as e:
        raise GraphLoadError(str(path), f"invalid JSON: {e}") from e


def graph_from_cargo_metadata(
    metadata: dict[str, Any],
    include_dev_dependencies: bool = True,
    source: str = "cargo metadata",
) -> DependencyGraph:
    """Convert a ``cargo metadata`` document into a DependencyGraph.

    Args:
        metadata: Parsed JSON from ``cargo metadata --format-version 1``.
        include_dev_dependencies: Keep edges that exist only as
            dev-dependencies.
        source: Label used in error messages.

    Raises:
        GraphLoadError: If a required section is missing or malformed.
    """
    try:
        raw_packages = metadata["packages"]
        raw_members = metadata["workspace_members"]
    except (KeyError, TypeError) as e:
        raise GraphLoadError(source, f"missing section {e}") from e

    resolve = metadata.get("resolve")
    if not resolve or "nodes" not in resolve:
        raise GraphLoadError(source, "no resolve section (was --no-deps used?)")

    ids: dict[str, PackageId] = {}
    nodes: list[PackageNode] = []
    for pkg in raw_packages:
        try:
            pid = PackageId(
                name=pkg["name"],
                version=pkg["version"],
                source=pkg.get("source"),
            )
            manifest_path = Path(pkg["manifest_path"])
            raw_id = pkg["id"]
        except (KeyError, TypeError) as e:
            raise GraphLoadError(source, f"malformed package record: missing {e}") from e
        ids[raw_id] = pid
        nodes.append(
            PackageNode(
                id=pid,
                manifest_path=manifest_path,
                has_build_script=_has_build_script(pkg),
            )
        )

    members = []
    for raw_id in raw_members:
        if raw_id not in ids:
            raise GraphLoadError(source, f"unknown workspace member {raw_id}")
        members.append(ids[raw_id])

    edges: list[tuple[PackageId, PackageId]] = []
    skipped_dev = 0
    for node in resolve["nodes"]:
        from_id = ids.get(node.get("id"))
        if from_id is None:
            raise GraphLoadError(source, f"resolve node for unknown package {node.get('id')}")
        for target, kinds in _node_links(node):
            to_id = ids.get(target)
            if to_id is None:
                raise GraphLoadError(source, f"dependency on unknown package {target}")
            if not include_dev_dependencies and kinds and all(k == "dev" for k in kinds):
                skipped_dev += 1
                continue
            edges.append((from_id, to_id))

    if skipped_dev:
        logger.debug("Skipped %d dev-only dependency edges", skipped_dev)

    graph = build_dependency_graph(nodes, edges, members)
    logger.debug(
        "Loaded graph: %d packages, %d edges, %d workspace members",
        len(graph),
        graph.edge_count,
        len(graph.workspace_members),
    )
    return graph


def _has_build_script(pkg: dict[str, Any]) -> bool:
    for target in pkg.get("targets") or []:
        if _BUILD_SCRIPT_KIND in (target.get("kind") or []):
            return True
    return False


def _node_links(node: dict[str, Any]) -> list[tuple[str, list[Optional[str]]]]:
    """(target id, dependency kinds) pairs for one resolve node.

    Newer cargo emits ``deps`` with ``dep_kinds``; older output only has the
    flat ``dependencies`` list.
    """
    deps = node.get("deps")
    if deps is not None:
        return [
            (dep["pkg"], [k.get("kind") for k in dep.get("dep_kinds") or []])
            for dep in deps
        ]
    return [(target, []) for target in node.get("dependencies") or []]
