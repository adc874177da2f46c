"""
visualizer.py — Live Dye Viewer
================================
A host render loop for the 2D fluid:
  - ticks the simulation once per animation frame
  - paints the dye field with imshow
  - turns mouse drags into dye + velocity injections

Uses matplotlib FuncAnimation for real-time updates.
"""

import logging

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.colors import LinearSegmentedColormap

from swirl import Vector2, viewport_to_grid
from swirl.config import MAX_SPLAT_SPEED, SPLAT_DYE, SPLAT_RADIUS

logger = logging.getLogger(__name__)

# Ink colormap: black → deep blue → cyan → white
INK_COLORS = ["#000000", "#0a1a40", "#1fa2ff", "#ffffff"]
ink_cmap = LinearSegmentedColormap.from_list("ink", INK_COLORS)


class FluidVisualizer:
    """
    Real-time viewer of the dye field.

    Usage (standalone):
        from swirl import Fluid
        from visualizer import FluidVisualizer

        fluid = Fluid(dt=0.1, diffusion=0.0001, size=64)
        viz = FluidVisualizer(fluid)
        viz.run()  # Opens live window; drag with the mouse to stir
    """

    def __init__(self, fluid, vmax: float = 1.0):
        self.fluid = fluid
        self.rect = fluid.rect
        self.vmax = vmax
        self._last_cell = None

        self._setup_figure()

    def _setup_figure(self):
        """Initialize the matplotlib figure and hook up the mouse."""
        self.fig, self.ax = plt.subplots(figsize=(6, 6))
        self.fig.patch.set_facecolor('#0a0a0a')
        self.ax.set_facecolor('#0a0a0a')
        self.ax.set_xticks([])
        self.ax.set_yticks([])
        for spine in self.ax.spines.values():
            spine.set_edgecolor('#333333')

        # Pixel extent == grid extent, so data coordinates are cell coordinates
        self.img = self.ax.imshow(
            np.zeros((self.rect.height, self.rect.width)),
            cmap=ink_cmap,
            vmin=0, vmax=self.vmax,
            interpolation='bilinear',
            origin='upper',
            extent=(0, self.rect.width, self.rect.height, 0),
        )

        self.title_text = self.ax.set_title(
            "Fluid — Frame 0 | 0.0 FPS",
            color='#cccccc', fontsize=10, fontfamily='monospace'
        )
        self.fig.canvas.mpl_connect("motion_notify_event", self.on_mouse_move)
        plt.tight_layout()

    def on_mouse_move(self, event):
        """Inject dye under the pointer; a drag also pushes the fluid along."""
        if event.inaxes is not self.ax or event.xdata is None:
            self._last_cell = None
            return

        cell = viewport_to_grid((self.rect.width, self.rect.height),
                                (event.xdata, event.ydata), self.rect)
        if cell is None:
            self._last_cell = None
            return

        self.fluid.splat_dye(cell, SPLAT_DYE, SPLAT_RADIUS)

        if event.button is not None and self._last_cell is not None:
            # Cells moved per event, converted to the solver's velocity units
            drag = Vector2(cell.x - self._last_cell.x, cell.y - self._last_cell.y)
            drag = drag / (float(self.fluid.dt) * self.rect.width)
            self.fluid.add_velocity(cell, drag.max_mag(MAX_SPLAT_SPEED))
        self._last_cell = cell

    def update(self, frame_num):
        """Called by FuncAnimation each frame. Ticks the sim and repaints."""
        self.fluid.tick()
        metrics = self.fluid.last_metrics

        self.img.set_data(self.fluid.dye_array())
        self.title_text.set_text(
            f"Fluid — Frame {metrics['frame']} | {metrics['fps']:.1f} FPS | "
            f"div_max={metrics['divergence_max']:.5f}"
        )
        return [self.img, self.title_text]

    def run(self, fps: int = 30, frames=None):
        """
        Start the live animation window.

        Args:
            fps    : Target animation frame rate
            frames : Total frames to render (None = infinite)
        """
        interval_ms = 1000 // fps
        self.anim = animation.FuncAnimation(
            self.fig,
            self.update,
            frames=frames,
            interval=interval_ms,
            blit=False,
            cache_frame_data=False,
        )
        logger.info("Viewer running at %d FPS target", fps)
        plt.show()
