import weakref

import numpy as np
import pytest

from config import DEFAULT_CFG, Parameters, Target
from drone import Drone, DroneState
from dynamics import rotational_accels, translational_accel
from kinematics import vector_sum, convert_to_inertial
from wind import Wind

DT = 0.1


def make_drone(targets=None, **kwargs):
    params = Parameters(targets=targets or [Target(1, 0, 0, 0)], **kwargs)
    return Drone(params, rng=np.random.default_rng(0))


def test_vector_sum_rejects_bad_vectors():
    assert np.allclose(vector_sum([1, 2, 3], (1, 1, 1), np.zeros(3)), [2, 3, 4])
    for bad in ([1, None, 2], [1, 2], [1, float('nan'), 0], "abc", [[1, 2, 3]]):
        with pytest.raises(ValueError, match="Bad vector"):
            vector_sum([0, 0, 0], bad)


def test_convert_to_inertial():
    v = [1.0, 2.0, 3.0]
    assert np.allclose(convert_to_inertial(v, 0, 0, 0), v)
    # yaw 90°: x → y
    assert np.allclose(convert_to_inertial([1, 0, 0], np.pi/2, 0, 0), [0, 1, 0])
    # тангаж с обратным знаком
    p = 0.3
    assert np.allclose(convert_to_inertial([0, 0, 1], 0, p, 0), [-np.sin(p), 0, np.cos(p)])
    r = 0.2
    assert np.allclose(convert_to_inertial([0, 0, 1], 0, 0, r), [0, -np.sin(r), np.cos(r)])


def test_motor_factors():
    d = make_drone()
    assert np.all(d.motor_factors == 1.0)
    d = make_drone(motor_imprecision_percent=10)
    assert np.all(np.abs(d.motor_factors - 1) <= 0.05)
    assert len(set(d.motor_factors.tolist())) == 4


def test_propulsion_holds_weak_reference():
    d = make_drone()
    assert isinstance(d.propulsion.drone, weakref.ProxyType)
    f_max = DEFAULT_CFG['MAX_THRUST_PER_MOTOR'] * DEFAULT_CFG['g']
    forces = d.propulsion.compute_forces(DT)
    assert forces.shape == (4,)
    assert np.all((forces >= 0) & (forces <= f_max))


def test_compute_pwms_returns_matching_thrust():
    d = make_drone()
    d.pos.get_value(2).distance = 0.5
    pwms, forces = d.propulsion.compute_pwms(DT)
    assert np.array_equal(pwms, d.propulsion.last_pwms)
    motor = d.propulsion.motors[0]
    assert np.allclose(forces, [motor.convert_pwm_to_thrust(p) for p in pwms])


def test_soft_ground_contact_clamps():
    for speed in (-1.5, -3.0, -4.9):
        d = make_drone()
        z = d.pos.get_value(2)
        z.distance = 0.01
        z.speed = speed
        d.update(DT)
        assert z.distance == 0.0
        assert z.speed == 0.0
        assert d.state is DroneState.FLYING


def test_hard_landing_starts_tumbling():
    d = make_drone()
    z = d.pos.get_value(2)
    z.distance = 0.05
    z.speed = -10.0
    d.update(DT)
    assert z.distance == 0.0 and z.speed == 0.0
    assert d.state is DroneState.TUMBLING
    assert d.broken_separation == DT


def test_tumbling_is_terminal():
    d = make_drone()
    z = d.pos.get_value(2)
    z.distance = 0.05
    z.speed = -10.0
    d.update(DT)
    pos = d.pos.get_distances()
    step = DEFAULT_CFG['SEPARATION_SPEED'] * DT

    for _ in range(20):
        before = d.broken_separation
        d.update(DT)
        assert d.broken_separation == pytest.approx(before + step)
        assert d.is_finished(0.0) == (d.broken_separation > DEFAULT_CFG['MAX_SEPARATION'])
        # разлёт без физики
        assert np.array_equal(d.pos.get_distances(), pos)
    assert d.state is DroneState.DESTROYED


def test_drone_stays_above_ground():
    d = make_drone(targets=[Target(0, 0, 0, 0)])
    for _ in range(100):
        d.update(DT)
        assert d.pos.get_distances()[2] >= 0.0


def test_update_propulsion_advances_and_holds_last_target():
    targets = [Target(1, 0, 0, 0, time_target_seconds=0.5), Target(2, 0, 0, 0)]
    d = make_drone(targets=targets)
    first = d.propulsion
    d.update_propulsion(0.3)
    assert d.current_target == 0 and d.propulsion is first

    d.update_propulsion(0.6)
    assert d.current_target == 1
    assert d.propulsion is not first
    assert d.propulsion.start_time == 0.6
    assert d.propulsion.target.height_target == 2.0

    second = d.propulsion
    d.update_propulsion(100.0)
    assert d.current_target == 1 and d.propulsion is second


def test_convergence_target_finishes_within_margins():
    d = make_drone(targets=[Target(1, 0, 0, 0), Target(1, 0, 0, 0, 5)])
    t = 0.0
    while d.current_target == 0 and t < 30:
        d.update(DT)
        t += DT
        d.update_propulsion(t)
    assert d.current_target == 1
    assert abs(d.pos.get_distances()[2] - 1.0) < DEFAULT_CFG['MARGINS']['height'] + 0.05


def test_is_finished_time_ceiling():
    d = make_drone()
    assert not d.is_finished(29.9)
    assert d.is_finished(30.1)
    assert d.is_finished(5.0, max_time=4.0)


def test_segments_follow_position():
    d = make_drone()
    d.pos.get_value(2).distance = 1.0
    segments = d.compute_segments()
    assert len(segments) == 4
    arm = DEFAULT_CFG['SIZE'] / 2 * np.sqrt(2)
    for start, end in segments:
        assert np.allclose(start, [0, 0, 1])
        assert np.linalg.norm(end - start) == pytest.approx(arm)


def test_wind_inactive_is_frozen():
    w = Wind(DEFAULT_CFG, active=False, rng=np.random.default_rng(1))
    for _ in range(50):
        w.update(DT)
    assert np.all(w.strength == 0)


def test_wind_random_walk_is_bounded():
    w = Wind(DEFAULT_CFG, active=True, rng=np.random.default_rng(1))
    limit = np.array(DEFAULT_CFG['WIND']['max_strength'])
    moved = False
    for _ in range(2000):
        w.update(DT)
        assert np.all(np.abs(w.strength) <= limit)
        assert np.linalg.norm(w.pole.get_distances()) <= w.max_pole_length + 1e-9
        moved = moved or np.any(w.strength != 0)
    assert moved


def test_wind_toggle_between_ticks():
    d = make_drone()
    d.wind.active = True
    d.update(DT)
    frozen = d.wind.strength.copy()
    d.wind.active = False
    d.update(DT)
    assert np.array_equal(d.wind.strength, frozen)


def test_tick_uses_same_forces_for_translation_and_rotation():
    d = make_drone(motor_imprecision_percent=10, wind_active=True)
    d.pos.get_value(2).distance = 0.5
    rates = [0.2, -0.1, 0.05]
    d.yaw.speed, d.pitch.speed, d.roll.speed = rates
    d.wind.strength = np.array([0.05, -0.04, 0.005])
    wind = d.wind.strength.copy()
    angles = d.angles
    speed = d.pos.get_speed()

    d.update(DT)

    # тяга уже с разбросом моторов
    raw = np.array([m.convert_pwm_to_thrust(m.pwm) for m in d.propulsion.motors])
    assert np.allclose(d.forces, raw * d.motor_factors)
    # обе части динамики — на одних и тех же силах и ветре до тика
    expected_lin = translational_accel(d.forces, angles, speed, wind,
                                       d.drag_computer, DEFAULT_CFG)
    assert np.allclose(d.pos.get_accel(), expected_lin)
    expected_rot = rotational_accels(d.forces, rates, wind,
                                     d.drag_computer, DEFAULT_CFG, d.moments)
    assert np.allclose([d.yaw.accel, d.pitch.accel, d.roll.accel], expected_rot)
    # ветер обновился в конце тика
    assert not np.array_equal(d.wind.strength, wind)


def test_crash_check_between_integration_and_wind():
    d = make_drone(wind_active=True)
    z = d.pos.get_value(2)
    # до интегрирования над землёй, после — под ней
    z.distance = 0.05
    z.speed = -10.0
    d.wind.strength = np.array([0.02, 0.02, 0.0])
    before = d.wind.strength.copy()

    d.update(DT)
    assert d.state is DroneState.TUMBLING
    assert z.distance == 0.0 and z.speed == 0.0
    assert not np.array_equal(d.wind.strength, before)

    # дальше только разлёт, ветер стоит
    frozen = d.wind.strength.copy()
    d.update(DT)
    assert np.array_equal(d.wind.strength, frozen)
