import struct

import pytest

from itfliesby.render_batches import (
    SIMPLE_QUAD_BATCH_MAX,
    SOLID_QUADS_MAX,
    BatchFullError,
    Shader,
    ShaderType,
    SimpleQuad,
    SimpleQuadBatch,
    SolidQuadBatch,
    SolidQuadUpdate,
)
from itfliesby.render_types import ColorHex, ColorNormalized

IDENTITY = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0)


def quad(texture):
    return SimpleQuad(IDENTITY, ColorNormalized(1.0, 0.5, 0.25, 1.0), texture)


def test_shader_valid_only_when_all_ids_set():
    assert Shader(1, 2, 3).is_valid()
    assert not Shader(1, 2, 0).is_valid()
    assert not Shader(0, 2, 3).is_valid()
    assert not Shader().is_valid()


def test_shader_type_lookup_by_value():
    assert ShaderType(3) is ShaderType.COUNT
    assert ShaderType(-1) is ShaderType.INVALID


def test_push_returns_consecutive_indices():
    batch = SimpleQuadBatch()
    assert [batch.push(quad(t)) for t in range(3)] == [0, 1, 2]
    assert batch.count == 3


def test_push_refuses_when_full():
    batch = SimpleQuadBatch()
    for t in range(SIMPLE_QUAD_BATCH_MAX):
        batch.push(quad(t))
    with pytest.raises(BatchFullError):
        batch.push(quad(0))
    assert len(batch) == SIMPLE_QUAD_BATCH_MAX


def test_push_batch_returns_indices_after_existing():
    batch = SimpleQuadBatch()
    batch.push(quad(9))
    assert batch.push_batch([quad(1), quad(2)]) == [1, 2]
    assert [q.texture for q in batch] == [9, 1, 2]


def test_push_batch_must_leave_room():
    batch = SimpleQuadBatch()
    with pytest.raises(BatchFullError):
        batch.push_batch([quad(t) for t in range(SIMPLE_QUAD_BATCH_MAX)])
    assert batch.count == 0
    assert len(batch.push_batch([quad(t) for t in range(SIMPLE_QUAD_BATCH_MAX - 1)])) == (
        SIMPLE_QUAD_BATCH_MAX - 1
    )


def test_drain_returns_in_order_and_empties():
    batch = SimpleQuadBatch()
    for t in (5, 6, 7):
        batch.push(quad(t))
    drained = batch.drain()
    assert [q.texture for q in drained] == [5, 6, 7]
    assert batch.count == 0
    assert batch.drain() == []


def test_simple_quad_rejects_bad_transform():
    with pytest.raises(ValueError):
        SimpleQuad((1.0, 2.0), ColorNormalized(), 0)


def test_solid_batch_update_replaces_contents():
    batch = SolidQuadBatch()
    batch.update([SolidQuadUpdate(IDENTITY, ColorHex(1, 2, 3, 4))] * 3)
    batch.update([SolidQuadUpdate(IDENTITY)])
    assert batch.count == 1


def test_solid_batch_update_limit():
    batch = SolidQuadBatch()
    batch.update([SolidQuadUpdate(IDENTITY)] * SOLID_QUADS_MAX)
    assert len(batch) == SOLID_QUADS_MAX
    with pytest.raises(BatchFullError):
        batch.update([SolidQuadUpdate(IDENTITY)] * (SOLID_QUADS_MAX + 1))


def test_pack_uniforms_layout_round_trip():
    transform = (1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0)
    batch = SolidQuadBatch()
    batch.update(
        [
            SolidQuadUpdate(transform, ColorHex(10, 20, 30, 40)),
            SolidQuadUpdate(IDENTITY, ColorHex(50, 60, 70, 80)),
        ]
    )
    block, model, color = 64, 0, 48
    data = batch.pack_uniforms(block, model, color)
    assert len(data) == 2 * block
    assert struct.unpack_from("<9f", data, model) == transform
    assert tuple(data[color : color + 4]) == (10, 20, 30, 40)
    assert struct.unpack_from("<9f", data, block + model) == IDENTITY
    assert tuple(data[block + color : block + color + 4]) == (50, 60, 70, 80)


def test_pack_uniforms_empty_batch():
    assert SolidQuadBatch().pack_uniforms(64, 0, 48) == b""


def test_pack_uniforms_rejects_offsets_outside_block():
    batch = SolidQuadBatch()
    batch.update([SolidQuadUpdate(IDENTITY)])
    with pytest.raises(ValueError):
        batch.pack_uniforms(32, 0, 28)
    with pytest.raises(ValueError):
        batch.pack_uniforms(64, 0, 62)