import numpy as np
import pytest

from config import DEFAULT_CFG
from dynamics import drone_radius
from motors import Motor, mix_accels

MASS = DEFAULT_CFG['MASS']
RADIUS = drone_radius(DEFAULT_CFG)
YAW_FACTOR = DEFAULT_CFG['YAW_FACTOR']


def mix(z=0.0, yaw=0.0, pitch=0.0, roll=0.0):
    return mix_accels(z, yaw, pitch, roll, MASS, RADIUS, YAW_FACTOR)


@pytest.mark.parametrize("z_accel", [-2.0, 0.0, 0.7, 5.0])
def test_pure_hover_is_symmetric(z_accel):
    a = mix(z=z_accel)
    assert np.allclose(a, z_accel / 4)
    assert len(set(a.tolist())) == 1


def test_pitch_pattern():
    a1, a2, a3, a4 = mix(pitch=1e-4)
    assert a1 > 0 and a1 == pytest.approx(a4)
    assert a2 == pytest.approx(-a1) and a3 == pytest.approx(-a1)


def test_roll_pattern():
    a1, a2, a3, a4 = mix(roll=1e-4)
    assert a1 > 0 and a1 == pytest.approx(a2)
    assert a3 == pytest.approx(-a1) and a4 == pytest.approx(-a1)


def test_yaw_pattern():
    a1, a2, a3, a4 = mix(yaw=1e-7)
    assert a1 > 0 and a1 == pytest.approx(a3)
    assert a2 == pytest.approx(-a1) and a4 == pytest.approx(-a1)


def test_valid_pwm_clamps_and_rounds():
    m = Motor(DEFAULT_CFG)
    assert m.base_pwm == 191.5
    assert m.compute_valid_pwm(300) == 255
    assert m.compute_valid_pwm(-10) == 128
    assert m.compute_valid_pwm(191.5) == 192
    assert m.compute_valid_pwm(200.4) == 200
    assert m.compute_valid_pwm(200.6) == 201


def test_thrust_always_within_motor_range():
    m = Motor(DEFAULT_CFG)
    f_max = DEFAULT_CFG['MAX_THRUST_PER_MOTOR'] * DEFAULT_CFG['g']
    for accel in np.linspace(-5, 5, 201):
        out = m.update(accel)
        assert 0.0 <= out['F'] <= f_max, f"accel={accel}: F={out['F']}"
        assert 128 <= out['pwm'] <= 255


def test_base_pwm_balances_gravity():
    m = Motor(DEFAULT_CFG)
    total = 4 * m.convert_pwm_to_thrust(m.base_pwm)
    assert total / MASS == pytest.approx(DEFAULT_CFG['g'])
