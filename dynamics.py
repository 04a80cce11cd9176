# dynamics.py
import numpy as np
from kinematics import convert_to_inertial, vector_sum, scale


class DragComputer:
    """Линейное приближение аэродрага: a = -0.5·ρ·Cd·S/m · v."""
    def __init__(self, size, mass, cd=0.4, density=1.2):
        self.cd = cd
        self.density = density
        self.area = size * size
        self.mass = mass

    def compute_drag(self, speed):
        factor = -0.5 * self.density * self.cd * self.area / self.mass
        return scale(speed, factor)


def drone_radius(cfg):
    return cfg['SIZE'] * np.sqrt(2) / 2


def compute_moments(cfg):
    m = cfg['MASS']
    r = drone_radius(cfg)
    return {
        'yaw':   m * r * r / 12,
        'pitch': 4 * m * r * r / 2,
        'roll':  m * r * r / 2,
    }


def translational_accel(forces, angles, speed, wind, drag_computer, cfg):
    """
    forces — тяга четырёх моторов (Н)
    angles — (yaw, pitch, roll)
    speed  — текущая скорость в ИКС
    wind   — ускорение от ветра в ИКС
    """
    # 1) тяга в B → ИКС
    thrust_B = np.array([0.0, 0.0, np.sum(forces) / cfg['MASS']])
    thrust_I = convert_to_inertial(thrust_B, *angles)

    # 2) гравитация + ветер + драг
    gravity = np.array([0.0, 0.0, -cfg['g']])
    drag = drag_computer.compute_drag(speed)

    return vector_sum(thrust_I, gravity, wind, drag)


def rotational_accels(forces, rates, wind, drag_computer, cfg, moments=None):
    """Угловые ускорения [yaw, pitch, roll] из асимметрии тяги, ветра и драга."""
    if moments is None:
        moments = compute_moments(cfg)
    f1, f2, f3, f4 = forces
    r = drone_radius(cfg)
    coupling = cfg['WIND']['coupling']

    yaw_torque = cfg['YAW_FACTOR'] * (f1 - f2 + f3 - f4)
    pitch_torque = r * (f1 - f2 - f3 + f4)
    roll_torque = r * (f1 + f2 - f3 - f4)

    yaw_wind = (wind[0] + wind[1]) / coupling
    pitch_wind = wind[1] / coupling
    roll_wind = wind[2] / coupling

    accels = [
        yaw_torque / moments['yaw'] + yaw_wind,
        pitch_torque / moments['pitch'] + pitch_wind,
        roll_torque / moments['roll'] + roll_wind,
    ]
    drag = drag_computer.compute_drag(rates)
    return vector_sum(accels, drag)
