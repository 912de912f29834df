"""Tests for the particle buffers and auxiliary objects."""

import math

import numpy as np
import pytest

from galaxyscope.physics.particle_system import (
    AuxiliaryKind,
    AuxiliaryObject,
    ParticleSystem,
    apply_transform,
)


class TestParticleSystem:
    def test_flat_buffers_are_three_per_particle(self):
        system = ParticleSystem(7)
        assert len(system) == 7
        assert len(system.position_buffer) == 21
        assert len(system.color_buffer) == 21

    def test_optional_metadata(self):
        bare = ParticleSystem(4)
        assert bare.velocities is None
        assert bare.group_ids is None

        full = ParticleSystem(4, velocities=True, initial_positions=True, group_ids=True,
                              base_colors=True, radii=True)
        assert full.velocities.shape == (4, 3)
        assert full.initial_positions.shape == (4, 3)
        assert full.base_colors.shape == (4, 3)
        assert full.radii.shape == (4,)
        assert full.group_ids.dtype == np.int8

    def test_position_buffer_is_a_view(self):
        system = ParticleSystem(2)
        system.positions[1, 2] = 3.0
        assert system.position_buffer[5] == 3.0

    def test_frozen_groups_reject_writes(self):
        system = ParticleSystem(3, group_ids=True)
        system.group_ids[:] = [0, 1, 1]
        system.freeze_groups()
        with pytest.raises(ValueError):
            system.group_ids[0] = 1

    def test_dispose_is_idempotent(self):
        system = ParticleSystem(5, velocities=True, group_ids=True)
        system.dispose()
        system.dispose()
        assert system.disposed
        assert system.count == 0
        assert system.velocities.shape == (0, 3)
        assert len(system.group_ids) == 0

    def test_world_positions_apply_rotation(self):
        system = ParticleSystem(1)
        system.positions[0] = [1.0, 0.0, 0.0]
        system.rotation = math.pi / 2
        np.testing.assert_allclose(system.world_positions(), [[0.0, 0.0, -1.0]], atol=1e-12)
        # Buffers themselves are untouched by the transform
        np.testing.assert_allclose(system.positions, [[1.0, 0.0, 0.0]])


class TestApplyTransform:
    def test_scale_and_offset(self):
        world = apply_transform(np.array([[1.0, 2.0, 3.0]]), scale=2.0, offset=np.array([1.0, 0.0, 0.0]))
        np.testing.assert_allclose(world, [[3.0, 4.0, 6.0]])

    def test_empty(self):
        assert apply_transform(np.zeros((0, 3)), rotation=1.0).shape == (0, 3)


class TestAuxiliaryObject:
    def test_kind_accepts_tag_string(self):
        aux = AuxiliaryObject("jet", "jet_top", np.zeros((2, 3)), np.ones((2, 3)))
        assert aux.kind is AuxiliaryKind.JET
        assert aux.count == 2
        assert "jet_top" in repr(aux)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            AuxiliaryObject("comet-tail", "tail", np.zeros((1, 3)), np.zeros((1, 3)))

    def test_center_offsets_world_positions(self):
        aux = AuxiliaryObject(AuxiliaryKind.COLLISION_POPULATION, "c", np.zeros((1, 3)),
                              np.zeros((1, 3)), center=(4.0, 0.0, 0.0))
        np.testing.assert_allclose(aux.world_positions(), [[4.0, 0.0, 0.0]])

    def test_transform_leaves_buffer_untouched(self):
        positions = np.ones((3, 3))
        aux = AuxiliaryObject(AuxiliaryKind.GLOW_HALO, "halo", positions, np.ones((3, 3)))
        aux.rotation = 1.2
        aux.scale = 2.0
        assert not np.allclose(aux.world_positions(), 1.0)
        np.testing.assert_allclose(aux.positions, 1.0)

    def test_dispose(self):
        aux = AuxiliaryObject(AuxiliaryKind.JET, "jet", np.zeros((4, 3)), np.zeros((4, 3)),
                              rng=np.random.default_rng(0))
        aux.dispose()
        aux.dispose()
        assert aux.disposed
        assert aux.count == 0
        assert aux.rng is None
