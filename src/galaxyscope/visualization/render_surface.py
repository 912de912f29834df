"""
Render surface module for galaxyscope.

A thin matplotlib host for the particle buffers: one 3D scatter for the main
particle system and one per auxiliary object, redrawn by FuncAnimation. The
surface only reads buffers; generation and motion live in the physics package.
"""

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from .. import config
from .color_system import parse_color


def _to_plot_axes(world):
    """Scene space is Y-up; mplot3d draws Z-up."""
    return world[:, 0], world[:, 2], world[:, 1]


class MatplotlibSurface:
    """Draws a scene into a matplotlib 3D axes."""

    def __init__(self, width=None, height=None, pixel_ratio=1.0, title=None):
        width = width or config.VIEWPORT_WIDTH
        height = height or config.VIEWPORT_HEIGHT
        dpi = config.DPI * min(max(pixel_ratio, 1.0), config.MAX_PIXEL_RATIO)

        self.fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        self.fig.patch.set_facecolor(config.BACKGROUND_COLOR)
        self.ax = self.fig.add_subplot(projection='3d')
        self.title = title or config.WINDOW_TITLE
        self._artists = []
        self.animation = None
        self.prepare_axes()

    def prepare_axes(self):
        """Fixed view; camera control is left to the host window."""
        ax = self.ax
        ax.set_facecolor(config.BACKGROUND_COLOR)
        limit = config.VIEW_LIMIT
        ax.set_xlim(-limit, limit)
        ax.set_ylim(-limit, limit)
        ax.set_zlim(-limit, limit)
        ax.view_init(elev=config.VIEW_ELEVATION, azim=config.VIEW_AZIMUTH)
        ax.set_axis_off()
        if self.fig.canvas.manager is not None:
            self.fig.canvas.manager.set_window_title(self.title)

    def on_scene_installed(self, scene):
        """Replace the scatter artists when the scene manager swaps scenes."""
        self._clear_artists()
        if scene is None:
            return
        self._artists.append(self._scatter(scene.system, config.POINT_SIZE))
        for aux in scene.auxiliaries:
            self._artists.append(self._scatter(aux, config.AUX_POINT_SIZE))
        self.draw(scene)

    def _scatter(self, owner, size):
        xs, ys, zs = _to_plot_axes(owner.world_positions())
        return self.ax.scatter(xs, ys, zs, s=size, c=owner.colors if len(owner.colors) else None,
                               depthshade=False, linewidths=0)

    def draw(self, scene):
        """
        Push the current buffers into the scatter artists.

        Returns:
            tuple: Updated artists (FuncAnimation contract)
        """
        owners = [scene.system] + list(scene.auxiliaries)
        if len(owners) != len(self._artists):
            return tuple(self._artists)
        for artist, owner in zip(self._artists, owners):
            artist._offsets3d = _to_plot_axes(owner.world_positions())
            if len(owner.colors):
                artist.set_facecolors(owner.colors)
            artist.set_alpha(owner.opacity)
        return tuple(self._artists)

    def start(self, frame_callback, frames=None, show=True):
        """
        Drive ``frame_callback`` from FuncAnimation at config.ANIMATION_INTERVAL.

        Args:
            frame_callback: Callable taking the frame index
            frames (int, optional): Stop after this many frames
            show (bool): Block in plt.show()
        """
        self.animation = FuncAnimation(
            self.fig, frame_callback, frames=frames,
            interval=config.ANIMATION_INTERVAL, blit=False,
            cache_frame_data=config.FRAME_CACHE, repeat=False,
        )
        if show:
            plt.show()
        return self.animation

    def save(self, path):
        self.fig.savefig(path, dpi=self.fig.dpi, facecolor=parse_color(config.BACKGROUND_COLOR))

    def _clear_artists(self):
        for artist in self._artists:
            artist.remove()
        self._artists = []

    def detach(self):
        """Stop the animation and close the figure."""
        if self.animation is not None and self.animation.event_source is not None:
            self.animation.event_source.stop()
        self.animation = None
        self._clear_artists()
        plt.close(self.fig)
