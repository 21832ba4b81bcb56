import pytest

from spknn import config

from .utils import MonoMBR


@pytest.fixture
def fresh_config():
    config.reset_runtime_config()
    yield
    config.reset_runtime_config()


@pytest.fixture
def three_rects():
    return [
        MonoMBR((0., 0.), (1., 1.), 0),
        MonoMBR((1., 1.), (2., 2.), 3),
        MonoMBR((4., 2.), (7., 3.), 7),
    ]


@pytest.fixture
def line_strings():
    import shapely.geometry
    return [shapely.geometry.LineString([(0, 1), (1, 2)]),
            shapely.geometry.LineString([(1, 0), (2, 2)]),
            shapely.geometry.LineString([(1, 1.1), (0, 2)]),
            shapely.geometry.LineString([(0, 0), (2, 0), (2, 2),
                                         (0, 2), (0, 0)]),
            shapely.geometry.LineString([(-1.3, 0), (-1, 2)]),
            shapely.geometry.LineString([(-1, -1), (-0.5, 0)]),
            shapely.geometry.LineString([(-10, 0), (-1, 5)]),
            shapely.geometry.LineString([(0.5, -0.5), (0, -1), (-1, 4)]),
            shapely.geometry.LineString([(4, 0.6), (-3, 0.5)]),
            shapely.geometry.LineString([(1, 3), (2, 3)]),
            shapely.geometry.LineString([(4, 1), (5, 2)])]
