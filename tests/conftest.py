"""Pytest fixtures for dependency graph tests."""

import pytest

from service_dependency_graph.payload import (
    ConsumptionEntry,
    ContractRef,
    ProvisionEntry,
    RelationshipPayload,
    ServiceRef,
)


def svc(service_id: str, name: str | None = None, slug: str | None = None, kind: str | None = None):
    return ServiceRef(id=service_id, display_name=name, slug=slug, service_kind=kind)


def contract(contract_id: str, operation: str | None = None):
    return ContractRef(id=contract_id, operation_name=operation)


@pytest.fixture
def simple_payload() -> RelationshipPayload:
    """Subject S provides C1 to K and consumes C2 from P."""
    return RelationshipPayload(
        subject=svc("S", "Subject", "subject-svc", "GRAPHQL"),
        provides=[ProvisionEntry(contract("C1", "getOrders"), [svc("K", "Consumer", "k")])],
        consumes=[ConsumptionEntry(contract("C2", "getUsers"), [svc("P", "Provider", "p")])],
    )


@pytest.fixture
def fan_in_payload() -> RelationshipPayload:
    """One contract of S consumed by five services."""
    consumers = [svc(f"K{i}", f"Consumer {i}") for i in range(5)]
    return RelationshipPayload(
        subject=svc("S", "Subject"),
        provides=[ProvisionEntry(contract("C1", "listItems"), consumers)],
    )


@pytest.fixture
def parallel_payload() -> RelationshipPayload:
    """S provides two different operations to the same consumer."""
    return RelationshipPayload(
        subject=svc("S", "Subject"),
        provides=[
            ProvisionEntry(contract("C1", "createOrder"), [svc("K", "Consumer")]),
            ProvisionEntry(contract("C2", "cancelOrder"), [svc("K", "Consumer")]),
        ],
    )


@pytest.fixture
def self_loop_payload() -> RelationshipPayload:
    """S consumes its own contract."""
    return RelationshipPayload(
        subject=svc("S", "Subject"),
        consumes=[ConsumptionEntry(contract("C1", "ping"), [svc("S", "Subject")])],
    )


@pytest.fixture
def mixed_payload() -> RelationshipPayload:
    """Several providers and consumers, one service on both sides."""
    return RelationshipPayload(
        subject=svc("S", "Subject"),
        provides=[
            ProvisionEntry(contract("C1", "a"), [svc("K1"), svc("K2", slug="k2")]),
            ProvisionEntry(contract("C2"), [svc("K1"), svc("B", "Both")]),
        ],
        consumes=[
            ConsumptionEntry(contract("C3", "b"), [svc("P1", "P one"), svc("P2")]),
            ConsumptionEntry(contract("C4", "c"), [svc("B", "Both"), svc("P3", "P three")]),
        ],
    )


@pytest.fixture
def query_response() -> dict:
    """Full query response as returned by the catalog API."""
    return {
        "data": {
            "service": {
                "contract": {
                    "dependencies": {
                        "service": {
                            "id": "svc-1",
                            "displayName": "Orders",
                            "slug": "orders",
                            "type": "GRAPHQL",
                        },
                        "provides": [
                            {
                                "contract": {"id": "c-1", "graphql": {"operation": "orders"}},
                                "consumers": [
                                    {"id": "svc-2", "displayName": "Billing", "slug": "billing"}
                                ],
                            }
                        ],
                        "consumes": [
                            {
                                "contract": {"id": "c-2", "graphql": {"operation": "users"}},
                                "providers": [{"id": "svc-3", "slug": "users", "type": "REST"}],
                            }
                        ],
                    }
                }
            }
        }
    }
