"""Parse raw relationship payloads from the service catalog query API."""

import json
from dataclasses import dataclass, field
from pathlib import Path


class PayloadError(ValueError):
    """Raised when a payload cannot be interpreted at all."""


@dataclass(frozen=True)
class ServiceRef:
    """Minimal identity of a service taking part in a relationship."""

    id: str | None
    display_name: str | None = None
    slug: str | None = None
    service_kind: str | None = None


@dataclass(frozen=True)
class ContractRef:
    """Identity of a contract (one exchanged capability)."""

    id: str | None
    operation_name: str | None = None


@dataclass
class ProvisionEntry:
    """The subject provides `contract`; `consumers` consume it."""

    contract: ContractRef | None
    consumers: list[ServiceRef] = field(default_factory=list)


@dataclass
class ConsumptionEntry:
    """The subject consumes `contract`; `providers` provide it."""

    contract: ContractRef | None
    providers: list[ServiceRef] = field(default_factory=list)


@dataclass
class RelationshipPayload:
    """Everything known about one service's immediate neighbourhood."""

    subject: ServiceRef | None = None
    provides: list[ProvisionEntry] = field(default_factory=list)
    consumes: list[ConsumptionEntry] = field(default_factory=list)


def _first(data: dict, *keys: str):
    """Return the first non-None value among `keys`."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _as_str(value) -> str | None:
    if value is None:
        return None
    return str(value)


def parse_service(data) -> ServiceRef | None:
    """Parse a service object. Accepts engine and query-API field names."""
    if not isinstance(data, dict):
        return None
    return ServiceRef(
        id=_as_str(data.get("id")),
        display_name=_as_str(_first(data, "displayName", "display_name")),
        slug=_as_str(data.get("slug")),
        service_kind=_as_str(_first(data, "serviceKind", "service_kind", "type")),
    )


def parse_contract(data) -> ContractRef | None:
    """Parse a contract object.

    The query API nests the operation under ``graphql.operation``; the
    flattened ``operationName`` form is accepted too.
    """
    if not isinstance(data, dict):
        return None
    operation = _first(data, "operationName", "operation_name", "operation")
    if operation is None and isinstance(data.get("graphql"), dict):
        operation = data["graphql"].get("operation")
    return ContractRef(id=_as_str(data.get("id")), operation_name=_as_str(operation))


def _parse_services(items) -> list[ServiceRef]:
    # Non-object items become id-less refs so the builder can report them
    if not isinstance(items, list):
        return []
    return [parse_service(item) or ServiceRef(id=None) for item in items]


def _unwrap_envelope(data: dict) -> dict | None:
    """Strip a full query response down to the dependency graph object.

    Handles ``{"data": {"service": {"contract": {"dependencies": ...}}}}`` and
    every suffix of that path.
    """
    if "data" in data:
        data = data["data"]
    for key in ("service", "contract", "dependencies"):
        if not isinstance(data, dict):
            return None
        if key == "service":
            inner = data.get("service")
            # A plain subject object is not the query namespace
            if isinstance(inner, dict) and "contract" in inner:
                data = inner
        elif key in data:
            data = data[key]
    return data if isinstance(data, dict) else None


def parse_payload(data) -> RelationshipPayload:
    """Build a RelationshipPayload from decoded JSON.

    Args:
        data: Decoded JSON value. ``None`` means "no graph" and yields an
            empty payload.

    Returns:
        The parsed payload. Malformed entries are kept as-is (missing ids,
        missing contracts) and left for the graph builder to skip.

    Raises:
        PayloadError: If `data` is neither an object nor null.
    """
    if data is None:
        return RelationshipPayload()
    if not isinstance(data, dict):
        raise PayloadError(f"Expected a JSON object, got {type(data).__name__}")

    graph = _unwrap_envelope(data)
    if graph is None:
        return RelationshipPayload()

    subject_data = graph.get("subject") if "subject" in graph else graph.get("service")
    payload = RelationshipPayload(subject=parse_service(subject_data))

    provides = graph.get("provides")
    if not isinstance(provides, list):
        provides = []
    for item in provides:
        if not isinstance(item, dict):
            item = {}
        payload.provides.append(
            ProvisionEntry(
                contract=parse_contract(item.get("contract")),
                consumers=_parse_services(item.get("consumers")),
            )
        )

    consumes = graph.get("consumes")
    if not isinstance(consumes, list):
        consumes = []
    for item in consumes:
        if not isinstance(item, dict):
            item = {}
        payload.consumes.append(
            ConsumptionEntry(
                contract=parse_contract(item.get("contract")),
                providers=_parse_services(item.get("providers")),
            )
        )

    return payload


def load_payload(path: Path) -> RelationshipPayload:
    """Read and parse a payload JSON file.

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the file is not valid JSON.
        PayloadError: If the JSON is not an object or null.
    """
    with open(path) as f:
        data = json.load(f)
    return parse_payload(data)
