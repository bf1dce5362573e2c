"""
Unit tests for diagram_converter/routing.py
"""

import pytest

from diagram_converter.geometry import BOTTOM, LEFT, RIGHT, TOP, Geometry
from diagram_converter.routing import CorridorRouter, PortRouter, make_router


def box(x, y, width=200, height=100):
    return Geometry(x, y, width, height)


class TestPortRouter:
    """Port choice from relative box position."""

    @pytest.fixture
    def router(self):
        return PortRouter()

    def test_same_row(self, router):
        hints = router.route(box(40, 40), box(440, 40))
        assert (hints.exit, hints.entry) == (RIGHT, LEFT)
        hints = router.route(box(440, 40), box(40, 60))
        assert (hints.exit, hints.entry) == (LEFT, RIGHT)
        assert hints.waypoints == ()

    def test_same_column(self, router):
        hints = router.route(box(40, 40), box(60, 390))
        assert (hints.exit, hints.entry) == (BOTTOM, TOP)
        hints = router.route(box(40, 390), box(40, 40))
        assert (hints.exit, hints.entry) == (TOP, BOTTOM)

    def test_diagonal_wide(self, router):
        hints = router.route(box(40, 40), box(840, 390))
        assert (hints.exit, hints.entry) == (RIGHT, TOP)

    def test_diagonal_up_and_left(self, router):
        hints = router.route(box(440, 740), box(40, 40))
        assert (hints.exit, hints.entry) == (LEFT, BOTTOM)


class TestCorridorRouter:
    """Routes through the gaps of the grid."""

    @pytest.fixture
    def router(self):
        return CorridorRouter(column_gap=200)

    def test_neighbours_stay_straight(self, router):
        hints = router.route(box(40, 40), box(440, 40))
        assert (hints.exit, hints.entry) == (RIGHT, LEFT)
        assert hints.waypoints == ()

    def test_distant_same_row_goes_over_the_top(self, router):
        hints = router.route(box(40, 40), box(1240, 40))
        assert (hints.exit, hints.entry) == (TOP, TOP)
        assert [(p.x, p.y) for p in hints.waypoints] == [(140, 20), (1340, 20)]

    def test_same_column_uses_column_gap(self, router):
        hints = router.route(box(40, 40), box(40, 390))
        assert (hints.exit, hints.entry) == (RIGHT, RIGHT)
        assert [(p.x, p.y) for p in hints.waypoints] == [(340, 90), (340, 440)]

    def test_diagonal_down(self, router):
        hints = router.route(box(40, 40), box(840, 390))
        assert (hints.exit, hints.entry) == (RIGHT, TOP)
        assert [(p.x, p.y) for p in hints.waypoints] == [(340, 90), (340, 370), (940, 370)]

    def test_diagonal_up_and_left(self, router):
        hints = router.route(box(840, 390), box(40, 40))
        assert (hints.exit, hints.entry) == (LEFT, BOTTOM)
        assert [(p.x, p.y) for p in hints.waypoints] == [(740, 440), (740, 160), (140, 160)]


class TestMakeRouter:
    """Router selection by configuration name."""

    def test_known_names(self):
        assert isinstance(make_router("ports", column_gap=200), PortRouter)
        corridor = make_router("corridor", column_gap=70)
        assert isinstance(corridor, CorridorRouter)
        assert corridor.column_gap == 70

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown router"):
            make_router("astar", column_gap=200)
