import json

import numpy as np
import pytest

from config import DEFAULT_CFG, Parameters, Target, load_config, load_parameters
from pid import ControlStrategy


def test_target_is_immutable():
    t = Target(1, 0.1, 0.2, 0.3, 5)
    with pytest.raises(AttributeError):
        t.height_target = 2
    assert t.get('pitch') == 0.2
    assert t == Target(1.0, 0.1, 0.2, 0.3, 5.0)
    with pytest.raises(ValueError):
        t.get('altitude')


def test_default_target_sequence():
    targets = Parameters(yaw_target=30).get_targets()
    assert len(targets) == 7
    assert targets[1].pitch_target == pytest.approx(-np.deg2rad(10))
    assert targets[3].yaw_target == pytest.approx(np.deg2rad(30))
    assert targets[-1].time_target_seconds == 30
    assert all(t.height_target == 1.0 for t in targets)


def test_explicit_targets_override_sequence():
    p = Parameters(targets=[Target(2, 0, 0, 0)])
    assert p.get_targets() == [Target(2, 0, 0, 0)]


def test_unknown_strategy_rejected():
    assert Parameters(strategy='pid').strategy is ControlStrategy.PID
    with pytest.raises(ValueError):
        Parameters(strategy='bang-bang')


def test_load_config_merges_nested(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({'MASS': 0.05, 'WIND': {'coupling': 40.0}}))
    cfg = load_config(path)
    assert cfg['MASS'] == 0.05
    assert cfg['WIND']['coupling'] == 40.0
    assert cfg['WIND']['max_strength'] == DEFAULT_CFG['WIND']['max_strength']
    # исходный словарь не тронут
    assert DEFAULT_CFG['MASS'] == 0.03
    assert DEFAULT_CFG['WIND']['coupling'] == 80.0


def test_load_parameters(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({
        'wind_active': True,
        'motor_imprecision_percent': 2,
        'strategy': 'pid',
        'targets': [{'height_target': 1.5}, {'height_target': 1.0, 'time_target_seconds': 3}],
    }))
    p = load_parameters(path)
    assert p.wind_active and p.motor_imprecision_percent == 2
    assert p.strategy is ControlStrategy.PID
    assert p.get_targets() == [Target(1.5), Target(1.0, time_target_seconds=3)]


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.json")
