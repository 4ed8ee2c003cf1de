import pytest

from glint_catalog import default_catalog
from optical_models import Konstant, LorentzDrudeMetal, Sellmeier

# Rakić et al. 1998, oscillators as (f, omega [eV], gamma [eV])
GOLD_OSCILLATORS_EV = [
    (0.024, 0.415, 0.241),
    (0.010, 0.830, 0.345),
    (0.071, 2.969, 0.870),
    (0.601, 4.304, 2.494),
    (4.384, 13.32, 2.214),
]
GOLD_PLASMA_EV = 9.03
GOLD_F0 = 0.760
GOLD_GAMMA0_EV = 0.053


@pytest.fixture
def gold():
    return LorentzDrudeMetal.from_ev(
        1.0, GOLD_PLASMA_EV, GOLD_GAMMA0_EV, GOLD_OSCILLATORS_EV,
        drude_strength=GOLD_F0, name="Au",
    )


@pytest.fixture
def sf10():
    return Sellmeier([(1.62153902, 0.0122241457),
                      (0.256287842, 0.0595736775),
                      (1.64447552, 147.468793)], name="SF10")


@pytest.fixture
def water():
    return Konstant(1.33, name="Water")


@pytest.fixture
def air():
    return Konstant(1.0, name="Air")


@pytest.fixture
def glass():
    return Konstant(1.5, name="Glass")


@pytest.fixture(scope="session")
def catalog():
    return default_catalog()
