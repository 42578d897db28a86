import os

import matplotlib
matplotlib.use("Agg")

import pytest

from shift_schedule.engine import TruckEngine, EngineCharacteristics
from shift_schedule.transmission import GearRatioTable

CONFIG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'configs')


@pytest.fixture
def config_dir():
    return CONFIG_DIR


@pytest.fixture
def engine():
    return TruckEngine()


@pytest.fixture
def gear_ratios():
    return GearRatioTable.default()


@pytest.fixture
def characteristics(engine):
    return EngineCharacteristics.from_engine(engine)
