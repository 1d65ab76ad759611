from pathlib import Path

import pytest

from robo_maze.maze_gen.map_loader import load_map

MAPS_DIR = Path(__file__).parent.parent / "maps"


@pytest.fixture
def maps_dir() -> Path:
    return MAPS_DIR


@pytest.fixture
def map1():
    return load_map(MAPS_DIR / "map-1.yaml")


@pytest.fixture
def map2():
    return load_map(MAPS_DIR / "map-2.yaml")


@pytest.fixture
def map3():
    return load_map(MAPS_DIR / "map-3.yaml")
