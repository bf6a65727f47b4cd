"""Property bags describing a meeting URL, with alias precedence resolution."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class UrlPropertyBag(BaseModel):
    """Loosely-typed URL description as accepted by embedding APIs."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    server_url: str | None = Field(default=None, alias="serverURL")
    room: str | None = None
    url: str | None = None
    protocol: str | None = None
    scheme: str | None = None
    domain: str | None = None
    host: str | None = None
    hostname: str | None = None
    app_link_scheme: str | None = Field(default=None, alias="appLinkScheme")
    room_name: str | None = Field(default=None, alias="roomName")
    jwt: str | None = None

    config_overwrite: dict[str, Any] | None = Field(default=None, alias="configOverwrite")
    config: dict[str, Any] | None = None
    config_override: dict[str, Any] | None = Field(default=None, alias="configOverride")
    interface_config_overwrite: dict[str, Any] | None = Field(
        default=None, alias="interfaceConfigOverwrite"
    )
    interface_config: dict[str, Any] | None = Field(default=None, alias="interfaceConfig")
    interface_config_override: dict[str, Any] | None = Field(
        default=None, alias="interfaceConfigOverride"
    )
    devices_overwrite: dict[str, Any] | None = Field(default=None, alias="devicesOverwrite")
    devices: dict[str, Any] | None = None
    devices_override: dict[str, Any] | None = Field(default=None, alias="devicesOverride")


# Logical field -> bag fields, highest precedence first.
ALIAS_PRECEDENCE: dict[str, tuple[str, ...]] = {
    "protocol": ("protocol", "scheme"),
    "domain": ("domain", "host", "hostname"),
    "room": ("room_name", "room"),
}

# Fragment namespaces in emission order, each with its bag fields by precedence.
OVERRIDE_NAMESPACES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("config", ("config_overwrite", "config", "config_override")),
    ("interfaceConfig", ("interface_config_overwrite", "interface_config", "interface_config_override")),
    ("devices", ("devices_overwrite", "devices", "devices_override")),
)


@dataclass(frozen=True, slots=True)
class ResolvedProperties:
    """A property bag with every alias group collapsed to a single value."""

    server_url: str | None
    base_room: str | None
    url: str | None
    protocol: str | None
    domain: str | None
    app_link_scheme: str | None
    room: str | None
    jwt: str | None
    overrides: tuple[tuple[str, Mapping[str, Any] | None], ...]


class URLPropertiesError(ValueError):
    """Structured error raised when a property bag fails validation."""

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__("URL properties validation failed")
        self.errors = errors

    @classmethod
    def from_pydantic_error(cls, exc: ValidationError) -> URLPropertiesError:
        details: list[dict[str, str]] = []
        for err in exc.errors():
            field = ".".join(str(item) for item in err["loc"]) or "url_properties"
            details.append(
                {
                    "field": field,
                    "message": err["msg"],
                    "type": err["type"],
                }
            )
        return cls(details)


def load_url_properties(payload: UrlPropertyBag | Mapping[str, Any]) -> UrlPropertyBag:
    """
    Validate ``payload`` into a :class:`UrlPropertyBag`.

    Raises:
        URLPropertiesError: when a field has an unusable type.
    """

    if isinstance(payload, UrlPropertyBag):
        return payload
    try:
        return UrlPropertyBag.model_validate(dict(payload))
    except ValidationError as exc:
        raise URLPropertiesError.from_pydantic_error(exc) from exc


def _first_non_empty(bag: UrlPropertyBag, names: tuple[str, ...]) -> str | None:
    for name in names:
        value = getattr(bag, name)
        if value:
            return value
    return None


def _first_defined(bag: UrlPropertyBag, names: tuple[str, ...]) -> Mapping[str, Any] | None:
    for name in names:
        value = getattr(bag, name)
        if value is not None:
            return value
    return None


def resolve_properties(bag: UrlPropertyBag) -> ResolvedProperties:
    """Collapse the aliased fields of ``bag`` using the precedence tables."""

    return ResolvedProperties(
        server_url=bag.server_url or None,
        base_room=bag.room or None,
        url=bag.url or None,
        protocol=_first_non_empty(bag, ALIAS_PRECEDENCE["protocol"]),
        domain=_first_non_empty(bag, ALIAS_PRECEDENCE["domain"]),
        app_link_scheme=bag.app_link_scheme or None,
        room=_first_non_empty(bag, ALIAS_PRECEDENCE["room"]),
        jwt=bag.jwt or None,
        overrides=tuple(
            (namespace, _first_defined(bag, names)) for namespace, names in OVERRIDE_NAMESPACES
        ),
    )
