"""
Notifications Adapter - notification channels used by sentinels.

Channel configuration is written in the template with kebab-case keys and
sent to Defender in camelCase, restricted to the keys of the channel type.
"""

import asyncio
from typing import Any, Dict, List

from adapters.base import (
    DeployContext,
    LocalDeclaration,
    OperationResult,
    ResourceAdapter,
    drop_none,
)
from clients.sentinel import SentinelClient

# Template config keys accepted per channel type
NOTIFICATION_CONFIG_KEYS: Dict[str, List[str]] = {
    "email": ["emails"],
    "slack": ["url"],
    "discord": ["url"],
    "webhook": ["url"],
    "telegram": ["bot-token", "chat-id"],
    "datadog": ["api-key", "metric-prefix"],
    "opsgenie": [
        "api-key",
        "instance-location",
        "alias",
        "responders",
        "visible-to",
        "actions",
        "tags",
        "details",
        "entity",
        "priority",
        "note",
    ],
    "pager-duty": [
        "token",
        "event-type",
        "routing-key",
        "event-action",
        "dedup-key",
        "severity",
        "component",
        "group",
        "class",
        "custom-details",
    ],
}


def kebab_to_camel(key: str) -> str:
    head, *rest = key.split("-")
    return head + "".join(part.capitalize() for part in rest)


def construct_notification(spec: Dict[str, Any], identity: str) -> Dict[str, Any]:
    """
    Build the Defender payload for a notification channel.

    Raises:
        ValueError: If the channel type is not supported.
    """
    channel_type = spec["type"]
    if channel_type not in NOTIFICATION_CONFIG_KEYS:
        raise ValueError(f"Unsupported notification type: {channel_type}")

    config = spec.get("config") or {}
    return {
        "type": channel_type,
        "name": spec["name"],
        "config": drop_none(
            {
                kebab_to_camel(key): config.get(key)
                for key in NOTIFICATION_CONFIG_KEYS[channel_type]
            }
        ),
        "paused": bool(spec.get("paused", False)),
        "stackResourceId": identity,
    }


class NotificationsAdapter(ResourceAdapter):
    """Adapter for notification channels."""

    def __init__(self, ctx: DeployContext, client: SentinelClient):
        super().__init__(ctx)
        self.client = client

    @property
    def name(self) -> str:
        return "Notifications"

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.list_notification_channels()

    async def update(
        self, declaration: LocalDeclaration, remote: Dict[str, Any]
    ) -> OperationResult:
        updated = await self.client.update_notification_channel(
            {
                **construct_notification(declaration.spec, remote["stackResourceId"]),
                "notificationId": remote["notificationId"],
            }
        )
        return OperationResult(
            name=updated.get("stackResourceId", remote["stackResourceId"]),
            id=updated.get("notificationId", remote["notificationId"]),
            success=True,
            response=updated,
        )

    async def create(self, declaration: LocalDeclaration, identity: str) -> OperationResult:
        created = await self.client.create_notification_channel(
            construct_notification(declaration.spec, identity)
        )
        return OperationResult(
            name=identity,
            id=created["notificationId"],
            success=True,
            response=created,
        )

    async def remove(self, entries: List[Dict[str, Any]]) -> None:
        await asyncio.gather(
            *(self.client.delete_notification_channel(n) for n in entries)
        )
