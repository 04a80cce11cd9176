# tests.py — сквозные сценарии полёта

import logging
import sys

import numpy as np

from config import DEFAULT_CFG, Parameters, Target
from drone import DroneState
from pid import ControlStrategy
from simulation import Simulation

NUMERIC = ['x', 'y', 'z', 'vx', 'vy', 'vz', 'ax', 'ay', 'az',
           'yaw', 'pitch', 'roll', 'f1', 'f2', 'f3', 'f4',
           'wind_x', 'wind_y', 'wind_z', 'broken_separation']


def hover_run(strategy=ControlStrategy.DOUBLE_PID, ticks=300):
    params = Parameters(targets=[Target(1, 0, 0, 0)], strategy=strategy)
    sim = Simulation(params, seed=1)
    for _ in range(ticks):
        sim.step()
    return sim


def test_hover_converges():
    """1) Взлёт с земли на 1 м, 300 тиков по 0.1 с: установившееся зависание."""
    sim = hover_run()
    df = sim.to_dataframe()
    assert len(df) == 300
    z = df['z'].to_numpy()
    assert abs(z[-1] - 1.0) < 0.05, f"final z={z[-1]:.4f}"
    tail = z[-50:]
    assert np.all(np.abs(tail - 1.0) < 0.05), f"z drifted: {tail.min():.4f}..{tail.max():.4f}"
    # без ветра и разброса моторов углы не шевелятся
    assert np.all(df[['yaw', 'pitch', 'roll']].to_numpy() == 0.0)
    assert sim.drone.state is DroneState.FLYING


def test_hover_converges_single_pid():
    sim = hover_run(ControlStrategy.PID)
    z = sim.to_dataframe()['z'].to_numpy()
    assert np.all(np.abs(z[-50:] - 1.0) < 0.05), f"final z={z[-1]:.4f}"


def test_outputs_stay_finite_with_disturbances():
    """2) Ветер + 5% разброс моторов, штатная программа целей: без NaN/Inf."""
    params = Parameters(wind_active=True, motor_imprecision_percent=5)
    sim = Simulation(params, seed=3)
    ticks = sim.run(max_ticks=300)
    assert 0 < ticks <= 300
    df = sim.to_dataframe()
    values = df[NUMERIC].to_numpy(dtype=float)
    assert np.isfinite(values).all()
    f_max = DEFAULT_CFG['MAX_THRUST_PER_MOTOR'] * DEFAULT_CFG['g'] * 1.05
    assert (df[['f1', 'f2', 'f3', 'f4']].to_numpy() <= f_max).all()
    assert (df['z'] >= 0).all()


def test_run_stops_at_time_ceiling():
    sim = Simulation(Parameters(targets=[Target(1, 0, 0, 0)]), seed=0)
    sim.run()
    assert sim.time > DEFAULT_CFG['T_MAX']
    assert sim.time - sim.dt <= DEFAULT_CFG['T_MAX']
    assert sim.is_finished()


def test_same_seed_same_flight():
    params = Parameters(wind_active=True, motor_imprecision_percent=5)
    a = Simulation(params, seed=11)
    b = Simulation(params, seed=11)
    a.run(max_ticks=100)
    b.run(max_ticks=100)
    assert a.to_dataframe().equals(b.to_dataframe())

    a.reset()
    assert a.ticks == 0 and a.history == []
    a.run(max_ticks=100)
    assert a.to_dataframe().equals(b.to_dataframe())


def test_target_sequence_progresses():
    sim = Simulation(Parameters(pitch_target=10), seed=0)
    sim.run(max_ticks=300)
    df = sim.to_dataframe()
    assert df['target'].is_monotonic_increasing
    assert df['target'].iloc[-1] > 0


def test_wind_switch_through_parameters_between_steps():
    params = Parameters(targets=[Target(1, 0, 0, 0)], wind_active=False)
    sim = Simulation(params, seed=5)
    sim.step()
    assert np.all(sim.drone.wind.strength == 0)

    params.wind_active = True
    for _ in range(20):
        sim.step()
    assert sim.drone.wind.active
    gust = sim.drone.wind.strength.copy()
    assert np.any(gust != 0), "ветер не включился с панели настроек"

    params.wind_active = False
    for _ in range(5):
        sim.step()
    assert np.array_equal(sim.drone.wind.strength, gust)


def test_run_is_logged(caplog):
    caplog.set_level(logging.INFO)
    sim = Simulation(Parameters(targets=[Target(1, 0, 0, 0)]), seed=0)
    sim.run(max_ticks=5)
    assert any('Simulation.run' in r.getMessage() for r in caplog.records)


if __name__ == "__main__":
    try:
        test_hover_converges()
        test_outputs_stay_finite_with_disturbances()
        test_same_seed_same_flight()
        print("\nВсе тесты успешно завершены.")
        sys.exit(0)
    except AssertionError as e:
        print("FAIL:", e)
        sys.exit(1)
