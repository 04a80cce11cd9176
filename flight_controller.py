# flight_controller.py
import weakref

import numpy as np

from config import AXES
from dynamics import compute_moments, drone_radius
from motors import Motor, mix_accels
from pid import make_axis_computer


class Propulsion:
    """
    Каскадный контроллер для одной цели (Target):
      – высота: z → vz → ускорение
      – yaw/pitch/roll: угол → угловая скорость → угловое ускорение → момент
    Выход: тяга четырёх моторов (Н) после микширования и ШИМ.
    Создаётся заново на каждую цель, интегралы не переносятся.
    """

    def __init__(self, drone, target, start_time=0.0):
        # drone владеет propulsion, а не наоборот
        self.drone = weakref.proxy(drone)
        self.target = target
        self.start_time = start_time
        cfg = drone.cfg
        params = drone.parameters

        self.computers = {
            axis: make_axis_computer(params.strategy, target.get(axis),
                                     cfg['MARGINS'][axis], params)
            for axis in AXES
        }
        self.moments = compute_moments(cfg)
        self.mass = cfg['MASS']
        self.radius = drone_radius(cfg)
        self.yaw_factor = cfg['YAW_FACTOR']
        self.motors = [Motor(cfg) for _ in range(4)]

    @property
    def last_pwms(self):
        return np.array([m.pwm for m in self.motors])

    def compute_accels(self, dt):
        z_accel = self.computers['height'].compute_accel(self.drone.pos.get_value(2), dt)
        yaw_accel = self.computers['yaw'].compute_accel(self.drone.yaw, dt)
        pitch_accel = self.computers['pitch'].compute_accel(self.drone.pitch, dt)
        roll_accel = self.computers['roll'].compute_accel(self.drone.roll, dt)

        yaw_torque = yaw_accel * self.moments['yaw']
        pitch_torque = pitch_accel * self.moments['pitch']
        roll_torque = roll_accel * self.moments['roll']

        return mix_accels(z_accel, yaw_torque, pitch_torque, roll_torque,
                          self.mass, self.radius, self.yaw_factor)

    def compute_pwms(self, dt):
        """(ШИМ, тяга) по четырём моторам за один проход."""
        accels = self.compute_accels(dt)
        outputs = [m.update(a) for m, a in zip(self.motors, accels)]
        return (np.array([o['pwm'] for o in outputs]),
                np.array([o['F'] for o in outputs]))

    def compute_forces(self, dt):
        _, forces = self.compute_pwms(dt)
        return forces

    def is_finished(self, time):
        """time — симуляционное время, с."""
        if self.target.time_target_seconds:
            return time - self.start_time > self.target.time_target_seconds
        return all(c.is_finished() for c in self.computers.values())
