# motors.py
import numpy as np


class Motor:
    """
    Мотор с ESC: команда ускорения → ШИМ → тяга.
    pwm = base + a·base, base = (pwm_max + pwm_min)/2
    F = (pwm - pwm_min)/(pwm_max - pwm_min) · F_max · g
    """
    def __init__(self, cfg):
        self.pwm_min, self.pwm_max = cfg['PWM_MIN'], cfg['PWM_MAX']
        self.max_thrust = cfg['MAX_THRUST_PER_MOTOR']
        self.g = cfg['g']
        self.base_pwm = (self.pwm_max + self.pwm_min) / 2
        self.pwm = self.pwm_min

    def compute_valid_pwm(self, pwm):
        # сатурация — не ошибка, а потолок/пол команды
        if pwm > self.pwm_max:
            return self.pwm_max
        if pwm < self.pwm_min:
            return self.pwm_min
        return int(np.floor(pwm + 0.5))

    def convert_pwm_to_thrust(self, pwm):
        rescaled = (pwm - self.pwm_min) / (self.pwm_max - self.pwm_min)
        return rescaled * self.max_thrust * self.g

    def update(self, accel):
        self.pwm = self.compute_valid_pwm(self.base_pwm + accel*self.base_pwm)
        return {'pwm': self.pwm, 'F': self.convert_pwm_to_thrust(self.pwm)}


def mix_accels(z_accel, yaw_torque, pitch_torque, roll_torque, mass, radius, yaw_factor):
    """
    X-схема, моторы 1..4:
      1: +roll +pitch +yaw    2: +roll -pitch -yaw
      3: -roll -pitch +yaw    4: -roll +pitch -yaw
    """
    lift = z_accel / 4
    arm = 4 * mass * radius
    yaw = yaw_torque / (4 * yaw_factor)
    return np.array([
        lift + (roll_torque + pitch_torque) / arm + yaw,
        lift + (roll_torque - pitch_torque) / arm - yaw,
        lift + (-roll_torque - pitch_torque) / arm + yaw,
        lift + (-roll_torque + pitch_torque) / arm - yaw,
    ])
