# pid.py
from enum import Enum


class PidComputer:
    """
    Одноконтурный PID: ошибка → управляющее воздействие.
    Интеграл — сумма всех прошлых ошибок (без затухания); integral_limit
    включает простую отсечку накопителя, по умолчанию выключена.
    """
    def __init__(self, set_point, weights, integral_limit=None):
        self.set_point = set_point
        self.kp, self.ki, self.kd = weights
        self.integral_limit = integral_limit
        self.total_error = 0.0
        self.last_error = 0.0
        self.last_variable = None
        self.last_computed = 0.0

    def reset(self):
        self.total_error = 0.0
        self.last_error = 0.0

    def compute_pid(self, process_variable, dt):
        assert dt > 0, f"PID step needs dt > 0, got {dt}"
        self.last_variable = process_variable
        error = self.set_point - process_variable

        self.total_error += error
        if self.integral_limit is not None:
            self.total_error = max(-self.integral_limit,
                                   min(self.integral_limit, self.total_error))
        integral = self.total_error * dt
        derivative = (error - self.last_error) / dt
        self.last_error = error

        computed = self.kp*error + self.ki*integral + self.kd*derivative
        self.last_computed = computed
        return computed

    def is_within_margin(self, margin):
        return abs(self.last_error) < margin

    def __repr__(self):
        return (f"PidComputer({self.last_variable} -> {self.set_point}, "
                f"computed={self.last_computed})")


class DoublePidComputer:
    """
    Каскад: положение/угол → целевая скорость → ускорение.
    Выход внешнего контура каждый тик становится уставкой внутреннего.
    """
    def __init__(self, set_point, margin, speed_weights, accel_weights,
                 integral_limit=None):
        self.speed_computer = PidComputer(set_point, speed_weights, integral_limit)
        self.accel_computer = PidComputer(0.0, accel_weights, integral_limit)
        self.margin = margin

    def compute_double_pid(self, accelerated, dt):
        target_speed = self.speed_computer.compute_pid(accelerated.distance, dt)
        self.accel_computer.set_point = target_speed
        return self.accel_computer.compute_pid(accelerated.speed, dt)

    compute_accel = compute_double_pid

    def is_finished(self):
        return self.speed_computer.is_within_margin(self.margin)


class SinglePidComputer:
    """Один PID прямо с положения на ускорение."""
    def __init__(self, set_point, margin, weights, integral_limit=None):
        self.computer = PidComputer(set_point, weights, integral_limit)
        self.margin = margin

    def compute_accel(self, accelerated, dt):
        return self.computer.compute_pid(accelerated.distance, dt)

    def is_finished(self):
        return self.computer.is_within_margin(self.margin)


class ControlStrategy(Enum):
    PID = 'pid'
    DOUBLE_PID = 'double-pid'

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            names = [s.value for s in cls]
            raise ValueError(f"Unknown control strategy {value!r}, expected one of {names}") from None


def make_axis_computer(strategy, set_point, margin, parameters):
    """Собрать регулятор оси по стратегии из Parameters."""
    if strategy is ControlStrategy.DOUBLE_PID:
        return DoublePidComputer(set_point, margin,
                                 parameters.pid_weights_speed,
                                 parameters.pid_weights_accel,
                                 parameters.integral_limit)
    if strategy is ControlStrategy.PID:
        return SinglePidComputer(set_point, margin,
                                 parameters.pid_weights_single,
                                 parameters.integral_limit)
    raise ValueError(f"Unsupported control strategy {strategy!r}")
