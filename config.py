# config.py
import copy
import json

import numpy as np

from pid import ControlStrategy

# Физические константы дрона (SI)
DEFAULT_CFG = {
    'DT': 0.1,
    'T_MAX': 30.0,
    'SIZE': 0.075,
    'MASS': 0.03,
    'g': 9.8,
    'MAX_THRUST_PER_MOTOR': 0.015,
    'PWM_MIN': 128,
    'PWM_MAX': 255,
    'MAX_SPEED': 5.0,
    'SEPARATION_SPEED': 5.0,
    'MAX_SEPARATION': 4.0,
    # тяга мотора → момент по рысканию, оценка
    'YAW_FACTOR': 0.000001,
    'DRAG': {'cd': 0.4, 'density': 1.2},
    'WIND': {
        'max_strength': [0.1, 0.1, 0.01],
        'random_walk': [0.1, 0.1, 0.02],
        'max_pole_length': 0.5,
        'drawing_scale': 3.0,
        'coupling': 80.0,
    },
    'MARGINS': {'height': 0.1, 'yaw': 1.0, 'pitch': 1.0, 'roll': 1.0},
}

AXES = ('height', 'yaw', 'pitch', 'roll')


class Target:
    """
    Одна точка программы полёта: высота в метрах, углы в радианах.
    time_target_seconds == 0 — держать, пока PID-контуры не сойдутся.
    """
    __slots__ = ('height_target', 'yaw_target', 'pitch_target',
                 'roll_target', 'time_target_seconds')

    def __init__(self, height_target=1.0, yaw_target=0.0, pitch_target=0.0,
                 roll_target=0.0, time_target_seconds=0.0):
        object.__setattr__(self, 'height_target', float(height_target))
        object.__setattr__(self, 'yaw_target', float(yaw_target))
        object.__setattr__(self, 'pitch_target', float(pitch_target))
        object.__setattr__(self, 'roll_target', float(roll_target))
        object.__setattr__(self, 'time_target_seconds', float(time_target_seconds))

    def __setattr__(self, name, value):
        raise AttributeError(f"Target is immutable, cannot set {name}")

    def get(self, axis):
        if axis not in AXES:
            raise ValueError(f"Unknown axis {axis!r}, expected one of {AXES}")
        return getattr(self, f"{axis}_target")

    def __eq__(self, other):
        if not isinstance(other, Target):
            return NotImplemented
        return all(getattr(self, k) == getattr(other, k) for k in self.__slots__)

    def __hash__(self):
        return hash(tuple(getattr(self, k) for k in self.__slots__))

    def __repr__(self):
        return (f"Target(height={self.height_target}, yaw={self.yaw_target:.3f}, "
                f"pitch={self.pitch_target:.3f}, roll={self.roll_target:.3f}, "
                f"time={self.time_target_seconds})")


class Parameters:
    """
    Настройки, которые задаются до запуска или между тиками.
    Углы здесь в градусах, в Target уходят в радианах.
    """

    def __init__(self, height_target=1.0, yaw_target=0.0, pitch_target=10.0,
                 roll_target=0.0, wind_active=False, motor_imprecision_percent=0.0,
                 pid_weights_speed=(0.5, 0.0, 0.0), pid_weights_accel=(1.0, 0.0, 0.0),
                 pid_weights_single=(0.5, 0.0, 1.0),
                 strategy=ControlStrategy.DOUBLE_PID, integral_limit=None,
                 targets=None):
        self.height_target = height_target
        self.yaw_target = yaw_target
        self.pitch_target = pitch_target
        self.roll_target = roll_target
        self.wind_active = wind_active
        self.motor_imprecision_percent = motor_imprecision_percent
        self.pid_weights_speed = tuple(pid_weights_speed)
        self.pid_weights_accel = tuple(pid_weights_accel)
        self.pid_weights_single = tuple(pid_weights_single)
        self.strategy = ControlStrategy.parse(strategy)
        self.integral_limit = integral_limit
        self.targets = list(targets) if targets is not None else None

    def get_targets(self):
        if self.targets:
            return list(self.targets)
        h = self.height_target
        yaw = np.deg2rad(self.yaw_target)
        pitch = np.deg2rad(self.pitch_target)
        return [
            Target(h, 0, 0, 0),
            Target(h, 0, -pitch, 0),
            Target(h, 0, 0, 0),
            Target(h, yaw, 0, 0),
            Target(h, yaw, -pitch, 0),
            Target(h, yaw, 0, 0),
            Target(h, 0, 0, 0, 30),
        ]


def load_config(path):
    """JSON-переопределения поверх DEFAULT_CFG (вложенные словари сливаются)."""
    with open(path) as f:
        overrides = json.load(f)
    cfg = copy.deepcopy(DEFAULT_CFG)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(cfg.get(key), dict):
            cfg[key].update(value)
        else:
            cfg[key] = value
    return cfg


def load_parameters(path):
    with open(path) as f:
        data = json.load(f)
    raw_targets = data.pop('targets', None)
    if raw_targets is not None:
        data['targets'] = [Target(**t) for t in raw_targets]
    return Parameters(**data)
