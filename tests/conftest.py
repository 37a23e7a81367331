"""
Shared fixtures for typegraph tests.
"""

import pytest

from engine.typegraph.reporting import LoggingReporter
from engine.typegraph.schema.builtins import install_builtins
from engine.typegraph.schema.registry import TypeRegistry
from engine.typegraph.store import InMemoryNodeStore, create_node


@pytest.fixture
def reporter():
    """Reporter that records diagnostics."""
    return LoggingReporter()


@pytest.fixture
def registry():
    """Registry with the built-in types installed."""
    reg = TypeRegistry()
    install_builtins(reg)
    return reg


@pytest.fixture
def person_pet_nodes():
    """Two people; Ada has two pets, Bob has one."""
    return [
        create_node("person-1", "Person", children=["pet-1", "pet-2"], name="Ada", age=36),
        create_node("person-2", "Person", children=["pet-3"], name="Bob", age=41),
        create_node("pet-1", "Pet", parent="person-1", name="Rex"),
        create_node("pet-2", "Pet", parent="person-1", name="Fido"),
        create_node("pet-3", "Pet", parent="person-2", name="Tom"),
    ]


@pytest.fixture
def person_pet_store(person_pet_nodes):
    """Node store holding the Person/Pet graph."""
    return InMemoryNodeStore(person_pet_nodes)


class AsyncNodeStore:
    """Coroutine-returning view of an InMemoryNodeStore."""

    def __init__(self, store):
        self._store = store

    async def get_types(self):
        return self._store.get_types()

    async def get_nodes_by_type(self, type_name):
        return self._store.get_nodes_by_type(type_name)

    async def get_node(self, node_id):
        return self._store.get_node(node_id)

    async def get_nodes_by_ids(self, ids, type=None, path=None):
        return self._store.get_nodes_by_ids(ids, type=type, path=path)


@pytest.fixture
def async_person_pet_store(person_pet_store):
    """The Person/Pet graph behind async store methods."""
    return AsyncNodeStore(person_pet_store)
