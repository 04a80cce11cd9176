# integrator.py
import numpy as np


class ScalarIntegrator:
    """
    Одна степень свободы (расстояние или угол), semi-implicit Euler:
    сначала скорость, потом положение по новой скорости.
    """
    def __init__(self, distance=0.0):
        self.distance = float(distance)
        self.speed = 0.0
        self.accel = 0.0

    def update(self, accel, dt):
        self.accel = float(accel)
        new_speed = self.speed + self.accel*dt
        new_distance = self.distance + new_speed*dt
        self.distance = new_distance
        self.speed = new_speed

    def __repr__(self):
        return f"ScalarIntegrator(distance={self.distance}, speed={self.speed}, accel={self.accel})"


class VectorIntegrator:
    """Три ScalarIntegrator: 0=x, 1=y, 2=z."""
    def __init__(self, distances=None):
        self.values = [ScalarIntegrator(), ScalarIntegrator(), ScalarIntegrator()]
        if distances is not None:
            for value, distance in zip(self.values, distances):
                value.distance = float(distance)

    def update(self, accel_vector, dt):
        for value, accel in zip(self.values, accel_vector):
            value.update(accel, dt)

    def get_distances(self):
        return np.array([v.distance for v in self.values])

    def get_speed(self):
        return np.array([v.speed for v in self.values])

    def get_accel(self):
        return np.array([v.accel for v in self.values])

    def get_value(self, index):
        return self.values[index]
