# wind.py
import numpy as np

from integrator import VectorIntegrator
from kinematics import vector_sum, scale


class Wind:
    """
    Ветер — ограниченное случайное блуждание по трём осям.
    pole — «флюгер» для отрисовки, на динамику не влияет.
    С parameters флаг включения читается оттуда на каждом тике.
    """
    def __init__(self, cfg, parameters=None, active=False, rng=None):
        w = cfg['WIND']
        self.g = cfg['g']
        self.parameters = parameters
        self._active = active
        self.rng = rng if rng is not None else np.random.default_rng()
        self.strength = np.zeros(3)
        self.max_strength = np.array(w['max_strength'], dtype=float)
        self.random_walk = np.array(w['random_walk'], dtype=float)
        self.max_pole_length = w['max_pole_length']
        self.drawing_scale = w['drawing_scale']
        self.pole = VectorIntegrator([0.0, 0.0, -self.max_pole_length])

    @property
    def active(self):
        if self.parameters is not None:
            return self.parameters.wind_active
        return self._active

    @active.setter
    def active(self, value):
        if self.parameters is not None:
            self.parameters.wind_active = value
        else:
            self._active = value

    def update(self, dt):
        if not self.active:
            return
        step = self.random_walk * (self.rng.random(3) - 0.5) * dt
        self.strength = np.clip(self.strength + step,
                                -self.max_strength, self.max_strength)
        self.update_pole(dt)

    def update_pole(self, dt):
        gravity = [0.0, 0.0, -self.g]
        self.pole.update(vector_sum(scale(self.strength, self.drawing_scale), gravity), dt)
        length = np.linalg.norm(self.pole.get_distances())
        if length > self.max_pole_length:
            ratio = length / self.max_pole_length
            for index in range(3):
                value = self.pole.get_value(index)
                value.distance /= ratio
                value.speed = 0.0
