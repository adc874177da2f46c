import pytest

from swirl.boundary import set_boundary
from swirl.coords import Axis, Corner, OnEdge, Rect, corner_coordinate, inward
from swirl.grid import ScalarField


def test_mirror_law_on_vector_edges(vector_grid):
    set_boundary(vector_grid)

    for cls, coord, value in vector_grid.boundary_items():
        if not isinstance(cls, OnEdge):
            continue
        neighbour = vector_grid.get(inward(coord, cls.edge))
        if cls.edge.axis is Axis.X:
            assert value.x == -neighbour.x
            assert value.y == neighbour.y
        else:
            assert value.y == -neighbour.y
            assert value.x == neighbour.x


def test_scalar_edges_copy_without_negation(scalar_grid):
    set_boundary(scalar_grid)

    for cls, coord, value in scalar_grid.boundary_items():
        if isinstance(cls, OnEdge):
            assert value == scalar_grid.get(inward(coord, cls.edge))


@pytest.mark.parametrize("fixture", ["scalar_grid", "vector_grid"])
def test_corner_is_mean_of_adjacent_edges(fixture, request):
    field = request.getfixturevalue(fixture)
    set_boundary(field)

    for corner in Corner:
        coord = corner_coordinate(corner, field.rect)
        row = field.get(inward(coord, corner.vertical))
        column = field.get(inward(coord, corner.horizontal))
        expected = (row + column) * 0.5
        value = field.get(coord)
        if fixture == "scalar_grid":
            assert value == pytest.approx(expected)
        else:
            assert value.x == pytest.approx(expected.x)
            assert value.y == pytest.approx(expected.y)


def test_interior_is_untouched(scalar_grid):
    before = {coord: scalar_grid.get(coord) for coord in scalar_grid.rect.interior()}
    set_boundary(scalar_grid)
    after = {coord: scalar_grid.get(coord) for coord in scalar_grid.rect.interior()}
    assert before == after


def test_unset_inward_neighbour_leaves_edge_alone():
    field = ScalarField(Rect(4, 4))
    field.set((0, 1), 5.0)
    set_boundary(field)
    assert field.get((0, 1)) == 5.0
