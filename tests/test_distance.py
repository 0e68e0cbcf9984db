"""
🧪 test_distance.py — haversine distance
"""

import math

from menu_delivery.services.delivery import haversine_km
from menu_delivery.services.geo import Coordinates

from tests.conftest import RIO_DE_JANEIRO, SAO_PAULO


def test_same_point_is_zero():
    assert haversine_km(SAO_PAULO, SAO_PAULO) == 0


def test_distance_is_symmetric():
    assert haversine_km(SAO_PAULO, RIO_DE_JANEIRO) == haversine_km(RIO_DE_JANEIRO, SAO_PAULO)


def test_sao_paulo_to_rio():
    assert 357 <= haversine_km(SAO_PAULO, RIO_DE_JANEIRO) <= 361


def test_one_degree_of_latitude():
    distance = haversine_km(Coordinates(0.0, 0.0), Coordinates(1.0, 0.0))
    assert math.isclose(distance, 6371 * math.pi / 180, rel_tol=1e-9)


def test_antipodal_points_do_not_fail():
    distance = haversine_km(Coordinates(0.0, 0.0), Coordinates(0.0, 180.0))
    assert math.isclose(distance, 6371 * math.pi, rel_tol=1e-9)


def test_nan_propagates():
    assert math.isnan(haversine_km(Coordinates(float("nan"), 0.0), SAO_PAULO))
