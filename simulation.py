# simulation.py
import numpy as np
import pandas as pd

from config import DEFAULT_CFG, Parameters
from drone import Drone
from logging_wrapper import log_calls


class Simulation:
    """
    Контекст симуляции: дрон, шаг, время и история.
    Планировщик (таймер, пауза, отрисовка) снаружи — он просто зовёт step().
    """

    def __init__(self, parameters=None, cfg=None, seed=None):
        self.parameters = parameters if parameters is not None else Parameters()
        self.cfg = cfg if cfg is not None else DEFAULT_CFG
        self.seed = seed
        self.dt = self.cfg['DT']
        self.reset()

    def reset(self):
        self.ticks = 0
        self.drone = Drone(self.parameters, self.cfg, rng=np.random.default_rng(self.seed))
        self.history = []

    @property
    def time(self):
        # тики × dt, чтобы не копить ошибку округления
        return self.ticks * self.dt

    def step(self):
        self.drone.update(self.dt)
        self.ticks += 1
        self.drone.update_propulsion(self.time)
        self.history.append(self.snapshot())

    def snapshot(self):
        d = self.drone
        x, y, z = d.pos.get_distances()
        vx, vy, vz = d.pos.get_speed()
        ax, ay, az = d.pos.get_accel()
        f = d.forces
        pwm = d.pwms
        w = d.wind.strength
        return {
            't': self.time,
            'x': x, 'y': y, 'z': z,
            'vx': vx, 'vy': vy, 'vz': vz,
            'ax': ax, 'ay': ay, 'az': az,
            'yaw': d.yaw.distance, 'pitch': d.pitch.distance, 'roll': d.roll.distance,
            'f1': f[0], 'f2': f[1], 'f3': f[2], 'f4': f[3],
            'pwm1': pwm[0], 'pwm2': pwm[1], 'pwm3': pwm[2], 'pwm4': pwm[3],
            'wind_x': w[0], 'wind_y': w[1], 'wind_z': w[2],
            'broken_separation': d.broken_separation,
            'target': d.current_target,
            'state': d.state.value,
        }

    def is_finished(self, max_time=None):
        return self.drone.is_finished(self.time, max_time)

    @log_calls
    def run(self, max_ticks=None, max_time=None):
        start = self.ticks
        while not self.is_finished(max_time):
            if max_ticks is not None and self.ticks - start >= max_ticks:
                break
            self.step()
        return self.ticks - start

    def to_dataframe(self):
        return pd.DataFrame(self.history)
