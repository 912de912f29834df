"""Tests for the animation clock, scene manager and frame context."""

import numpy as np
import pytest

from galaxyscope.core.galaxy_params import ConfigurationError
from galaxyscope.core.lifecycle import AnimationClock, FrameContext, Scene, SceneManager


class RecordingSurface:
    """Stand-in render surface that records what the lifecycle hands it."""

    def __init__(self):
        self.installed = []
        self.drawn = []
        self.detached = False

    def on_scene_installed(self, scene):
        self.installed.append(scene)

    def draw(self, scene):
        self.drawn.append(scene)
        return ()

    def detach(self):
        self.detached = True


class TestAnimationClock:
    def test_zero_before_start(self, fake_time):
        assert AnimationClock(fake_time).elapsed() == 0.0

    def test_elapsed(self, fake_time):
        clock = AnimationClock(fake_time).start()
        fake_time.now += 2.5
        assert clock.elapsed() == pytest.approx(2.5)
        assert clock.running

    def test_pause_and_resume(self, fake_time):
        clock = AnimationClock(fake_time).start()
        fake_time.now += 1.0
        clock.pause()
        fake_time.now += 50.0
        assert clock.elapsed() == pytest.approx(1.0)
        assert not clock.running
        clock.resume()
        fake_time.now += 0.5
        assert clock.elapsed() == pytest.approx(1.5)

    def test_start_is_idempotent(self, fake_time):
        clock = AnimationClock(fake_time).start()
        fake_time.now += 3.0
        clock.start()
        assert clock.elapsed() == pytest.approx(3.0)


class TestSceneManager:
    def test_apply_installs_scene(self, small_preset):
        manager = SceneManager(seed=0)
        scene = manager.apply(small_preset("quasar"))
        assert isinstance(scene, Scene)
        assert manager.scene is scene
        assert manager.system.count == 600
        assert len(manager.auxiliaries) == 5

    def test_change_disposes_previous_generation(self, small_preset):
        manager = SceneManager(seed=0)
        manager.apply(small_preset("quasar"))
        old_system = manager.system
        old_auxiliaries = manager.auxiliaries

        manager.apply(small_preset("supernova"))
        assert old_system.disposed
        assert all(aux.disposed for aux in old_auxiliaries)
        reachable = manager.auxiliaries + list(manager.scene.auxiliaries)
        assert not any(old is new for old in old_auxiliaries for new in reachable)
        assert manager.system is not old_system

    def test_failed_generation_keeps_current_scene(self, small_preset):
        manager = SceneManager(seed=0)
        scene = manager.apply(small_preset("spiral"))
        before = scene.system.positions.copy()

        with pytest.raises(ConfigurationError):
            manager.apply(small_preset("elliptical", inside_color="#zzzzzz"))
        assert manager.scene is scene
        assert not scene.system.disposed
        np.testing.assert_array_equal(scene.system.positions, before)

    def test_apply_mid_frame_is_rejected(self, small_preset):
        manager = SceneManager(seed=0)
        manager.apply(small_preset("spiral"))
        manager.begin_frame()
        with pytest.raises(RuntimeError):
            manager.apply(small_preset("lenticular"))
        manager.end_frame()

    def test_request_is_deferred_to_frame_boundary(self, small_preset):
        manager = SceneManager(seed=0)
        first = manager.apply(small_preset("spiral"))

        manager.begin_frame()
        manager.request(small_preset("collision"))
        assert manager.scene is first
        assert manager.pending is not None
        manager.end_frame()
        assert manager.scene is first

        manager.begin_frame()
        assert manager.params.type.value == "collision"
        assert manager.pending is None
        assert first.system.disposed
        manager.end_frame()

    def test_bad_request_is_recorded_not_raised(self, small_preset):
        manager = SceneManager(seed=0)
        first = manager.apply(small_preset("spiral"))
        manager.request(small_preset("spiral", outside_color="nope"))
        manager.begin_frame()
        manager.end_frame()
        assert manager.scene is first
        assert isinstance(manager.last_error, ConfigurationError)

    def test_latest_request_wins(self, small_preset):
        manager = SceneManager(seed=0)
        manager.request(small_preset("spiral"))
        manager.request(small_preset("quasar"))
        manager.begin_frame()
        manager.end_frame()
        assert manager.params.type.value == "quasar"

    def test_frames_since_install(self, small_preset):
        manager = SceneManager(seed=0)
        manager.apply(small_preset("spiral"))
        for _ in range(3):
            manager.begin_frame()
            manager.end_frame()
        assert manager.frames_since_install == 3
        manager.apply(small_preset("spiral"))
        assert manager.frames_since_install == 0

    def test_advance_without_scene(self):
        assert SceneManager().advance(1.0) is None

    def test_listeners_and_teardown(self, small_preset):
        manager = SceneManager(seed=0)
        seen = []
        manager.add_listener(seen.append)
        scene = manager.apply(small_preset("spiral"))
        manager.teardown()
        assert seen == [scene, None]
        assert manager.scene is None
        assert scene.system.disposed
        manager.apply(small_preset("spiral"))
        assert len(seen) == 2


class TestFrameContext:
    def test_install_draw_teardown(self, small_preset, fake_time):
        manager = SceneManager(seed=0)
        scene = manager.apply(small_preset("spiral"))
        surface = RecordingSurface()
        context = FrameContext(manager, AnimationClock(fake_time)).install(surface)
        assert surface.installed == [scene]

        fake_time.now += 10.0
        context(0)
        assert surface.drawn == [scene]
        assert scene.system.rotation == pytest.approx(10.0 * 0.05)

        context.teardown()
        assert surface.detached
        assert scene.system.disposed
        assert context.surface is None

    def test_clock_survives_configuration_change(self, small_preset, fake_time):
        manager = SceneManager(seed=0)
        manager.apply(small_preset("supernova", period=10.0))
        surface = RecordingSurface()
        context = FrameContext(manager, AnimationClock(fake_time)).install(surface)

        fake_time.now += 4.0
        context(0)
        manager.request(small_preset("supernova", period=10.0, stars_count=50))
        fake_time.now += 1.0
        context(1)

        assert len(surface.installed) == 2
        assert context.clock.elapsed() == pytest.approx(5.0)
        # New buffers are stepped at the shared clock, not from zero
        system = manager.system
        np.testing.assert_allclose(system.positions, system.velocities * 0.5)

    def test_pause_resume_keeps_animation_in_sync(self, small_preset, fake_time):
        manager = SceneManager(seed=0)
        manager.apply(small_preset("quasar"))
        context = FrameContext(manager, AnimationClock(fake_time)).install()

        fake_time.now += 2.0
        context(0)
        context.clock.pause()
        fake_time.now += 30.0
        context(1)
        paused = manager.system.positions.copy()
        context.clock.resume()
        context(2)
        np.testing.assert_allclose(manager.system.positions, paused)

    def test_frame_closed_after_draw_error(self, small_preset, fake_time):
        class FailingSurface(RecordingSurface):
            def draw(self, scene):
                raise RuntimeError("lost context")

        manager = SceneManager(seed=0)
        manager.apply(small_preset("spiral"))
        context = FrameContext(manager, AnimationClock(fake_time)).install(FailingSurface())
        with pytest.raises(RuntimeError):
            context(0)
        manager.apply(small_preset("lenticular"))
        assert manager.params.type.value == "lenticular"
