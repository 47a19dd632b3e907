import pytest

from pgntree.manager import PgnManager
from pgntree.tests import EMPTY_PGN, SIMPLE_PGN, VARIATION_PGN


@pytest.fixture()
def simple_game():
    return PgnManager(SIMPLE_PGN)


@pytest.fixture()
def variation_game():
    return PgnManager(VARIATION_PGN)


@pytest.fixture()
def empty_game():
    return PgnManager(EMPTY_PGN)
