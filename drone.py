# drone.py
import logging
from enum import Enum

import numpy as np

from config import DEFAULT_CFG, Parameters
from dynamics import DragComputer, translational_accel, rotational_accels, compute_moments
from flight_controller import Propulsion
from integrator import ScalarIntegrator, VectorIntegrator
from kinematics import convert_to_inertial, vector_sum, scale
from wind import Wind

logger = logging.getLogger(__name__)


class DroneState(Enum):
    FLYING = 'flying'
    TUMBLING = 'tumbling'
    DESTROYED = 'destroyed'


class Drone:
    """
    Твёрдое тело квадрокоптера: углы, позиция, моторы, драг, ветер.
    После жёсткой посадки переходит в TUMBLING (разлёт частей),
    при broken_separation > MAX_SEPARATION — DESTROYED.
    """

    def __init__(self, parameters=None, cfg=None, rng=None):
        self.parameters = parameters if parameters is not None else Parameters()
        self.cfg = cfg if cfg is not None else DEFAULT_CFG
        self.rng = rng if rng is not None else np.random.default_rng()

        self.yaw = ScalarIntegrator()
        self.pitch = ScalarIntegrator()
        self.roll = ScalarIntegrator()
        self.pos = VectorIntegrator()
        self.broken_separation = 0.0
        self.forces = np.zeros(4)
        self.pwms = np.zeros(4, dtype=int)

        drag = self.cfg['DRAG']
        self.drag_computer = DragComputer(self.cfg['SIZE'], self.cfg['MASS'],
                                          cd=drag['cd'], density=drag['density'])
        self.moments = compute_moments(self.cfg)
        self.wind = Wind(self.cfg, parameters=self.parameters, rng=self.rng)

        imprecision = self.parameters.motor_imprecision_percent
        self.motor_factors = 1 + (self.rng.random(4) - 0.5) * imprecision / 100
        logger.debug("motor factors %s", self.motor_factors)

        self.targets = self.parameters.get_targets()
        if not self.targets:
            raise ValueError("Drone needs at least one target")
        self.current_target = 0
        self.propulsion = Propulsion(self, self.targets[self.current_target])

    @property
    def state(self):
        if self.broken_separation > self.cfg['MAX_SEPARATION']:
            return DroneState.DESTROYED
        if self.broken_separation > 0:
            return DroneState.TUMBLING
        return DroneState.FLYING

    @property
    def angles(self):
        return (self.yaw.distance, self.pitch.distance, self.roll.distance)

    def update(self, dt):
        if self.broken_separation:
            self.compute_broken(dt)
            return
        # порядок важен: силы → трансляция → ротация (те же силы) → удар → ветер
        self.forces = self.compute_forces(dt)
        accel = self.compute_accel()
        self.pos.update(accel, dt)
        yaw_rot, pitch_rot, roll_rot = self.compute_rotational_accels()
        self.yaw.update(yaw_rot, dt)
        self.pitch.update(pitch_rot, dt)
        self.roll.update(roll_rot, dt)
        self.check_crash(dt)
        self.wind.update(dt)

    def check_crash(self, dt):
        z = self.pos.get_value(2)
        if z.distance >= 0:
            return
        logger.info("ground contact at vz=%.3f (max %.1f)", z.speed, self.cfg['MAX_SPEED'])
        z.distance = 0.0
        if abs(z.speed) > self.cfg['MAX_SPEED']:
            logger.warning("hard landing at vz=%.3f, drone broken", z.speed)
            self.broken_separation = dt
        z.speed = 0.0

    def compute_broken(self, dt):
        self.broken_separation += self.cfg['SEPARATION_SPEED'] * dt

    def update_propulsion(self, time):
        if self.state is not DroneState.FLYING:
            return
        if not self.propulsion.is_finished(time):
            return
        if self.current_target + 1 >= len(self.targets):
            # последняя цель: держим её
            return
        self.current_target += 1
        target = self.targets[self.current_target]
        logger.info("t=%.1f s: target %d -> %s", time, self.current_target, target)
        self.propulsion = Propulsion(self, target, start_time=time)

    def compute_forces(self, dt):
        forces = self.propulsion.compute_forces(dt)
        self.pwms = self.propulsion.last_pwms
        return forces * self.motor_factors

    def compute_accel(self):
        return translational_accel(self.forces, self.angles, self.pos.get_speed(),
                                   self.wind.strength, self.drag_computer, self.cfg)

    def compute_rotational_accels(self):
        rates = [self.yaw.speed, self.pitch.speed, self.roll.speed]
        return rotational_accels(self.forces, rates, self.wind.strength,
                                 self.drag_computer, self.cfg, self.moments)

    def convert_to_inertial(self, vector):
        return convert_to_inertial(vector, *self.angles)

    def compute_segments(self):
        """Четыре луча рамы в ИКС: [(start, end), ...], раздвинутые при разлёте."""
        dist = self.cfg['SIZE'] / 2
        endpoints = [[-dist, -dist, 0], [dist, -dist, 0], [dist, dist, 0], [-dist, dist, 0]]
        distances = self.pos.get_distances()
        segments = []
        for endpoint in endpoints:
            inertial = self.convert_to_inertial(endpoint)
            start = vector_sum(distances, scale(inertial, self.broken_separation))
            end = vector_sum(start, inertial)
            segments.append((start, end))
        return segments

    def is_finished(self, time, max_time=None):
        if self.state is DroneState.DESTROYED:
            return True
        if max_time is None:
            max_time = self.cfg['T_MAX']
        return time > max_time
