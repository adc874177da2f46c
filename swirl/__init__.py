"""
swirl/ — 2D Stable Fluids Package
==================================
Exports the interfaces a host needs.

Render loop imports: Fluid → tick(), dye()
Input handling imports: Fluid → add_dye(), add_velocity(); viewport_to_grid
"""

from .config import SimulationConfig
from .coords import Coord2, Corner, Edge, Rect
from .forces import viewport_to_grid
from .grid import FieldShapeError, ScalarField, VectorField
from .simulation import Fluid
from .vector import Vector2

__all__ = [
    "Coord2", "Corner", "Edge", "FieldShapeError", "Fluid", "Rect",
    "ScalarField", "SimulationConfig", "Vector2", "VectorField", "viewport_to_grid",
]
