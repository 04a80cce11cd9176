# kinematics.py
import numpy as np


def vector_sum(*vectors):
    """Сумма 3-векторов; битый вектор (не 3 компоненты, NaN, Inf) → ValueError."""
    total = np.zeros(3)
    for vector in vectors:
        try:
            v = np.asarray(vector, dtype=float)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Bad vector for sum: {vector!r}") from exc
        if v.shape != (3,) or not np.isfinite(v).all():
            raise ValueError(f"Bad vector for sum: {vector!r}")
        total += v
    return total


def scale(vector, factor):
    return factor * np.asarray(vector, dtype=float)


def rotation_body_to_inertial(yaw, pitch, roll):
    # Z-Y-X, тангаж с обратным знаком
    cy, sy = np.cos(yaw), np.sin(yaw)
    cp, sp = np.cos(-pitch), np.sin(-pitch)
    cr, sr = np.cos(roll), np.sin(roll)
    Rz = np.array([[ cy, -sy, 0],
                   [ sy,  cy, 0],
                   [  0,   0, 1]])
    Ry = np.array([[ cp, 0, sp],
                   [  0, 1,  0],
                   [-sp, 0, cp]])
    Rx = np.array([[1,  0,   0],
                   [0, cr, -sr],
                   [0, sr,  cr]])
    return Rz @ Ry @ Rx


def convert_to_inertial(vector, yaw, pitch, roll):
    return rotation_body_to_inertial(yaw, pitch, roll) @ np.asarray(vector, dtype=float)
