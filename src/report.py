"""
Deployment Report - per-kind outputs and the aggregate deployment record.

The aggregate report is printed after every deploy and appended as one JSON
line to a per-stack deployment log. The log is append-only.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class DeployOutput:
    """Responses recorded for one resource kind during a deploy."""

    created: List[Any] = field(default_factory=list)
    updated: List[Any] = field(default_factory=list)
    removed: List[Any] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "removed": list(self.removed),
            "created": list(self.created),
            "updated": list(self.updated),
        }


@dataclass
class RelayerDeployOutput(DeployOutput):
    """Relayer output, carrying the nested API key output."""

    relayer_keys: DeployOutput = field(default_factory=DeployOutput)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["relayerKeys"] = self.relayer_keys.to_dict()
        return data


@dataclass
class DeployReport:
    """Aggregate record of one deployment run."""

    stack: str
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )
    secrets: DeployOutput = field(default_factory=DeployOutput)
    contracts: DeployOutput = field(default_factory=DeployOutput)
    relayers: RelayerDeployOutput = field(default_factory=RelayerDeployOutput)
    autotasks: DeployOutput = field(default_factory=DeployOutput)
    notifications: DeployOutput = field(default_factory=DeployOutput)
    sentinels: DeployOutput = field(default_factory=DeployOutput)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stack": self.stack,
            "timestamp": self.timestamp,
            "sentinels": self.sentinels.to_dict(),
            "autotasks": self.autotasks.to_dict(),
            "contracts": self.contracts.to_dict(),
            "relayers": self.relayers.to_dict(),
            "notifications": self.notifications.to_dict(),
            "secrets": self.secrets.to_dict(),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the report; ``indent=None`` gives a single line."""
        separators = (",", ":") if indent is None else None
        return json.dumps(
            self.to_dict(),
            indent=indent,
            separators=separators,
        )


def append_deployment_log(path: str, report: DeployReport) -> None:
    """
    Append a report as one JSON line to a deployment log.

    Args:
        path: Log file path; parent directories are created as needed.
        report: The report to append.
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "a") as f:
        f.write(report.to_json(indent=None) + "\n")
    logger.info(f"Deployment log appended to {path}")


def read_deployment_log(path: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Read records from a deployment log, oldest first.

    Args:
        path: Log file path.
        limit: Only return the last ``limit`` records.

    Returns:
        List of report dicts. Missing files yield an empty list.
    """
    if not os.path.exists(path):
        return []

    records = []
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if line:
                records.append(json.loads(line))

    if limit is not None:
        records = records[-limit:] if limit > 0 else []
    return records
