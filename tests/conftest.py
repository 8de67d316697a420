"""Pytest fixtures shared by the family tree tests."""

import os

# Headless matplotlib for plotting tests
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from database import SQLiteStorage
from store import GraphStore


class MemoryStorage:
    """Persistence adapter that keeps saved snapshots in memory."""

    def __init__(self, members=None):
        self.members = members
        self.saves = 0

    def load(self):
        return self.members

    def save(self, members):
        self.members = list(members)
        self.saves += 1


def assert_spouse_symmetry(store: GraphStore):
    by_id = {m.id: m for m in store.members}
    for m in store.members:
        partner = by_id.get(m.spouse_id)
        if partner is not None:
            assert partner.spouse_id == m.id, f"{m.id} -> {partner.id} is one-sided"


@pytest.fixture
def store():
    """Empty store with no persistence."""
    return GraphStore()


@pytest.fixture
def family(store):
    """
    Two generations: Adam and Beth married, with children Carl and Dora.
    Returns the store and a name -> Member dict.
    """
    adam = store.create({"name": "Adam", "gender": "male", "generation": 1})
    beth = store.create({"name": "Beth", "gender": "female", "generation": 1, "spouse_id": adam.id})
    carl = store.create(
        {"name": "Carl", "gender": "male", "generation": 2, "father_id": adam.id, "mother_id": beth.id}
    )
    dora = store.create({"name": "Dora", "gender": "female", "generation": 2, "father_id": adam.id})
    return store, {"adam": adam, "beth": beth, "carl": carl, "dora": dora}


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def sqlite_storage(tmp_path):
    return SQLiteStorage(tmp_path / "family_tree.db")
