"""Client slug -> published sheet lookup."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping

from roas_dashboard.exceptions import ClientNotConfiguredError, ConfigurationError, UnknownClientError
from roas_dashboard.infrastructure.sheet_client import build_sheet_url


@dataclass(frozen=True)
class ClientConfig:
    slug: str
    name: str
    sheet_id: str | None = None
    gid: str = "0"

    @property
    def has_sheet(self) -> bool:
        return bool(self.sheet_id)


@dataclass(frozen=True)
class SheetLocator:
    """Resolved sheet; ``url`` is None in demo mode."""

    url: str | None
    client_name: str | None = None


class ClientRegistry:
    def __init__(self, clients: Mapping[str, ClientConfig] | None = None) -> None:
        self._clients: Dict[str, ClientConfig] = dict(clients or {})

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ClientRegistry":
        clients: Dict[str, ClientConfig] = {}
        for slug, entry in raw.items():
            if not isinstance(entry, Mapping):
                raise ConfigurationError(f'Invalid client entry for "{slug}"', "expected an object")
            clients[str(slug)] = ClientConfig(
                slug=str(slug),
                name=str(entry.get("name") or slug),
                sheet_id=entry.get("sheetId") or None,
                gid=str(entry.get("gid") or "0"),
            )
        return cls(clients)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "ClientRegistry":
        config_path = Path(path)
        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigurationError("Client config not found", str(config_path)) from exc
        except json.JSONDecodeError as exc:
            raise ConfigurationError("Client config is not valid JSON", str(exc)) from exc
        if not isinstance(raw, Mapping):
            raise ConfigurationError("Client config must be a JSON object", str(config_path))
        return cls.from_mapping(raw)

    def get(self, slug: str) -> ClientConfig | None:
        return self._clients.get(slug)

    def clients(self) -> List[Dict[str, Any]]:
        return [
            {"slug": slug, "name": config.name, "has_sheet": config.has_sheet}
            for slug, config in self._clients.items()
        ]


def resolve_sheet(
    registry: ClientRegistry,
    client: str | None = None,
    sheet: str | None = None,
    gid: str | None = None,
) -> SheetLocator:
    """
    Resolve the sheet to load.

    A client slug takes priority over a direct sheet id; with neither the
    dashboard runs in demo mode.
    """
    if client:
        config = registry.get(client)
        if config is None:
            raise UnknownClientError(client)
        if not config.has_sheet:
            raise ClientNotConfiguredError(client, config.name)
        return SheetLocator(url=build_sheet_url(config.sheet_id, config.gid), client_name=config.name)

    if sheet:
        return SheetLocator(url=build_sheet_url(sheet, gid or "0"))

    return SheetLocator(url=None)
