"""Shared fixtures for knowledgenet tests."""

from pathlib import Path

import pytest

from knowledgenet.knn.loader import load_knowledge_file
from knowledgenet.knn.network import KnowledgeNodeNetwork

DATA_DIR = Path(__file__).parent / "data"


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock(start=1_000.0)


@pytest.fixture
def pet_data_path():
    return DATA_DIR / "pet_data.txt"


@pytest.fixture
def pet_network(clock, pet_data_path):
    """Network loaded with the pet knowledge file."""
    network = KnowledgeNodeNetwork(clock=clock, name="pets")
    load_knowledge_file(network, pet_data_path)
    return network
