"""
Scene lifecycle module for galaxyscope.

Owns the active particle system and auxiliary objects, swaps them atomically
when the configuration changes and drives the kinematics from a process-wide
animation clock. Everything runs on the frame-callback thread; configuration
changes requested from elsewhere are queued and applied at the next frame
boundary.
"""

import logging
import time
from collections import namedtuple

from ..physics import generator, kinematics
from .galaxy_params import ConfigurationError

logger = logging.getLogger(__name__)


Scene = namedtuple('Scene', ['params', 'system', 'auxiliaries'])


class AnimationClock:
    """
    Monotonic elapsed time shared by every scene.

    Pausing freezes the elapsed value; resuming continues from it, so
    time-keyed animations pick up exactly where they stopped.
    """

    def __init__(self, time_source=time.perf_counter):
        self._time_source = time_source
        self._started_at = None
        self._paused_at = None
        self._paused_total = 0.0

    @property
    def running(self):
        return self._started_at is not None and self._paused_at is None

    def start(self):
        if self._started_at is None:
            self._started_at = self._time_source()
        return self

    def pause(self):
        if self.running:
            self._paused_at = self._time_source()

    def resume(self):
        if self._paused_at is not None:
            self._paused_total += self._time_source() - self._paused_at
            self._paused_at = None

    def elapsed(self):
        """Seconds of running time since start (0 before start)."""
        if self._started_at is None:
            return 0.0
        now = self._paused_at if self._paused_at is not None else self._time_source()
        return max(0.0, now - self._started_at - self._paused_total)


class SceneManager:
    """
    Owner of the active scene.

    ``apply`` generates the replacement before touching the current scene, so
    a failed generation leaves the previous buffers installed and displayed.
    The swap itself is a single reference assignment: a frame sees either the
    old scene or the new one, never a mixture.
    """

    def __init__(self, seed=None):
        self.seed = seed
        self._scene = None
        self._pending = None
        self._in_frame = False
        self._listeners = []
        self.last_error = None
        self.frames_since_install = 0

    @property
    def scene(self):
        return self._scene

    @property
    def params(self):
        return self._scene.params if self._scene else None

    @property
    def system(self):
        return self._scene.system if self._scene else None

    @property
    def auxiliaries(self):
        return list(self._scene.auxiliaries) if self._scene else []

    @property
    def pending(self):
        return self._pending

    def add_listener(self, callback):
        """Register ``callback(scene)``, called after every install and with None on teardown."""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def apply(self, params):
        """
        Generate and install a scene for ``params`` immediately.

        Raises:
            RuntimeError: If called while a frame is being processed
            ConfigurationError: If generation fails; the current scene is kept
        """
        if self._in_frame:
            raise RuntimeError("Configuration changes cannot be applied mid-frame; use request()")

        try:
            system, auxiliaries = generator.generate(params, seed=self.seed)
        except Exception:
            logger.exception("Generation failed for %s; keeping the current scene", params.type.value)
            raise

        new_scene = Scene(params, system, tuple(auxiliaries))
        old_scene, self._scene = self._scene, new_scene
        self.frames_since_install = 0
        if old_scene is not None:
            self._dispose(old_scene)

        logger.info("Installed %s scene: %d particles, %d auxiliary objects",
                    params.type.value, system.count, len(auxiliaries))
        self._notify(new_scene)
        return new_scene

    def request(self, params):
        """Queue a configuration change for the next frame boundary."""
        self._pending = params

    def begin_frame(self):
        """
        Apply a queued configuration change, if any, and mark the frame as started.

        A queued configuration that fails to generate is dropped and kept in
        ``last_error``; the frame continues with the current scene.
        """
        if self._pending is not None:
            params, self._pending = self._pending, None
            try:
                self.apply(params)
                self.last_error = None
            except ConfigurationError as exc:
                self.last_error = exc
        self._in_frame = True

    def end_frame(self):
        self._in_frame = False
        self.frames_since_install += 1

    def advance(self, elapsed):
        """Run one kinematics step on the current scene."""
        scene = self._scene
        if scene is None:
            return None
        kinematics.step(scene.system, scene.auxiliaries, elapsed, scene.params)
        return scene

    def teardown(self):
        """Dispose every owned buffer and detach all listeners."""
        if self._scene is not None:
            self._dispose(self._scene)
            self._scene = None
        self._pending = None
        self._notify(None)
        self._listeners.clear()

    @staticmethod
    def _dispose(scene):
        scene.system.dispose()
        for aux in scene.auxiliaries:
            aux.dispose()

    def _notify(self, scene):
        for callback in list(self._listeners):
            callback(scene)


class FrameContext:
    """
    Frame callback handed to the host's frame-scheduling primitive.

    Bundles the animation clock and the scene manager; ``install`` attaches a
    render surface and starts the clock, ``teardown`` releases everything.
    """

    def __init__(self, manager, clock=None):
        self.manager = manager
        self.clock = clock or AnimationClock()
        self.surface = None

    def install(self, surface=None):
        self.surface = surface
        if surface is not None:
            self.manager.add_listener(surface.on_scene_installed)
            if self.manager.scene is not None:
                surface.on_scene_installed(self.manager.scene)
        self.clock.start()
        return self

    def __call__(self, frame=None):
        """Process one frame: apply queued changes, step kinematics, draw."""
        manager = self.manager
        manager.begin_frame()
        try:
            scene = manager.advance(self.clock.elapsed())
            if scene is not None and self.surface is not None:
                return self.surface.draw(scene)
            return ()
        finally:
            manager.end_frame()

    def teardown(self):
        if self.surface is not None:
            self.manager.remove_listener(self.surface.on_scene_installed)
            self.surface.detach()
            self.surface = None
        self.manager.teardown()
