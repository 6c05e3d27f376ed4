import numpy as np
import pytest

from chat_sdr.config import LayerConfig, RegionConfig
from chat_sdr.model import TransitionRegion


def _onehot(n, idx):
    v = np.zeros(n, dtype=np.int8)
    v[list(idx)] = 1
    return v


def _region(rows=2, cols=4, **layer_kwargs):
    cfg = RegionConfig(layers=[LayerConfig(num_input_rows=rows, num_input_cols=cols, **layer_kwargs)])
    return TransitionRegion(cfg, name="t")


def test_contract_basics():
    region = _region()
    assert region.input_size == 8
    assert region.num_layers() == 1
    assert region.timestep() == 0
    region.set_input(_onehot(8, [1, 2]))
    region.step(3)
    assert region.timestep() == 3
    snap = region.layer(0).snapshot()
    assert snap.active_column_indices == (1, 2)
    assert (snap.columns_x, snap.columns_y, snap.num_columns) == (4, 2, 8)
    assert len(snap.column_cell_masks) == 8


def test_set_input_rejects_wrong_width():
    region = _region()
    with pytest.raises(ValueError):
        region.set_input(np.zeros(7, dtype=np.int8))
    with pytest.raises(ValueError):
        region.set_input(np.zeros((2, 4), dtype=np.int8))


def test_learns_alternating_sequence():
    region = _region()
    a = _onehot(8, [0, 1])
    b = _onehot(8, [5, 6])
    history = []
    for t in range(8):
        region.set_input(a if t % 2 == 0 else b)
        region.step(1)
        snap = region.layer(0).snapshot()
        history.append(all(snap.is_predictive(c) for c in snap.active_column_indices))
    # a->b and b->a are both known from the fourth input on
    assert history[:3] == [False, False, False]
    assert all(history[3:])
    np.testing.assert_array_equal(region.layer(0).predicted_columns(), [0, 1])


def test_activation_threshold_delays_prediction():
    region = _region(activation_threshold=2)
    a = _onehot(8, [0])
    b = _onehot(8, [7])
    for t in range(4):
        region.set_input(a if t % 2 == 0 else b)
        region.step(1)
    # b->a seen once only
    assert region.layer(0).predicted_columns().size == 0
    for t in range(4, 7):
        region.set_input(a if t % 2 == 0 else b)
        region.step(1)
    np.testing.assert_array_equal(region.layer(0).predicted_columns(), [7])


def test_learning_disabled_never_predicts():
    region = _region(learning=False)
    for t in range(10):
        region.set_input(_onehot(8, [t % 2]))
        region.step(1)
    snap = region.layer(0).snapshot()
    assert not any(m.predictive for m in snap.column_cell_masks)


def test_snapshot_cells_burst_or_follow_prediction():
    region = _region(cells_per_column=3)
    a = _onehot(8, [0])
    b = _onehot(8, [1])
    region.set_input(a)
    region.step(1)
    snap = region.layer(0).snapshot()
    assert snap.column_cell_masks[0].active == 0b111
    for t in range(1, 6):
        region.set_input(a if t % 2 == 0 else b)
        region.step(1)
    snap = region.layer(0).snapshot()
    mask = snap.column_cell_masks[1]
    assert mask.predictive != 0
    assert mask.active == mask.predictive
    assert bin(mask.predictive).count("1") == 1


def test_snapshot_is_read_only():
    region = _region()
    region.set_input(_onehot(8, [2]))
    region.step(1)
    layer = region.layer(0)
    first = layer.snapshot()
    second = layer.snapshot()
    assert first == second
    assert region.timestep() == 1


def test_two_layers_chain_active_columns():
    cfg = RegionConfig(layers=[LayerConfig(num_input_rows=2, num_input_cols=4), LayerConfig()])
    region = TransitionRegion(cfg)
    region.set_input(_onehot(8, [3, 4]))
    region.step(1)
    assert region.num_layers() == 2
    assert region.layer(1).snapshot().active_column_indices == (3, 4)


def test_introspection_queries():
    region = _region(cells_per_column=2)
    a = _onehot(8, [0, 1])
    b = _onehot(8, [6])
    for t in range(4):
        region.set_input(a if t % 2 == 0 else b)
        region.step(1)
    layer = region.layer(0)
    assert layer.activation_threshold() == 1

    prox = layer.query_proximal(2, 1)
    assert len(prox.synapses) == 1
    assert (prox.synapses[0].input_x, prox.synapses[0].input_y) == (2, 1)
    assert layer.query_proximal(9, 9).synapses == ()

    # column 6 sits at (2, 1) and is predicted by context "a" (ordinal 0, cell 0)
    assert layer.num_segments(2, 1, 0) == 1
    assert layer.num_segments(2, 1, 1) == 0
    distal = layer.query_distal(2, 1, 0, 0)
    assert {(s.src_column_x, s.src_column_y) for s in distal.synapses} == {(0, 0), (1, 0)}
    assert all(s.connected for s in distal.synapses)
    assert layer.query_distal(2, 1, 0, 5).synapses == ()
    assert layer.num_segments(0, 0, 7) == 0


def test_one_context_per_distinct_pattern():
    region = _region()
    layer = region.layer(0)
    assert layer.num_contexts() == 0
    for idx in ([0], [3], [0], [3], [0, 3]):
        region.set_input(_onehot(8, idx))
        region.step(1)
    assert layer.num_contexts() == 3
