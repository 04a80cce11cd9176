# step_response.py

import numpy as np

from config import AXES, Parameters, Target, DEFAULT_CFG
from logging_wrapper import log_calls
from simulation import Simulation


def compute_metrics(t, y, setpoint):
    """
    Оценка переходного процесса оси по записанному отклику.
    Отдаёт (интеграл квадрата ошибки, перерегулирование в %, время входа в 2%-трубку).
    При нулевой уставке перерегулирование считаем нулевым.
    """
    times = np.asarray(t, dtype=float)
    response = np.asarray(y, dtype=float)
    error = setpoint - response

    sq = error ** 2
    ise = float(np.sum((sq[1:] + sq[:-1]) * np.diff(times)) / 2)

    if setpoint == 0:
        overshoot = 0.0
    else:
        overshoot = 100.0 * max(0.0, (response.max() - setpoint) / abs(setpoint))

    inside = np.flatnonzero(np.abs(error) <= 0.02 * abs(setpoint))
    settling = times[inside[0]] if inside.size else times[-1]
    return ise, overshoot, settling


@log_calls
def simulate_axis_step(axis, amp, t_step=5.0, t_final=15.0, height=1.0,
                       parameters=None, cfg=None, seed=None):
    """
    Зависание на height до t_step, затем скачок по одной оси
      axis   — 'height', 'yaw', 'pitch' или 'roll'
      amp    — амплитуда скачка (м для height, рад для углов)
    Возвращает (t, y): время и отклик оси.
    """
    if axis not in AXES:
        raise ValueError(f"Unknown axis {axis!r}, expected one of {AXES}")
    cfg = cfg if cfg is not None else DEFAULT_CFG
    base = parameters if parameters is not None else Parameters()

    step = {'height_target': height, 'yaw_target': 0.0,
            'pitch_target': 0.0, 'roll_target': 0.0}
    step[f"{axis}_target"] = height + amp if axis == 'height' else amp
    targets = [Target(height, 0, 0, 0, time_target_seconds=t_step), Target(**step)]

    params = Parameters(
        wind_active=base.wind_active,
        motor_imprecision_percent=base.motor_imprecision_percent,
        pid_weights_speed=base.pid_weights_speed,
        pid_weights_accel=base.pid_weights_accel,
        pid_weights_single=base.pid_weights_single,
        strategy=base.strategy,
        integral_limit=base.integral_limit,
        targets=targets,
    )
    sim = Simulation(params, cfg, seed=seed)
    sim.run(max_time=t_final)

    df = sim.to_dataframe()
    column = 'z' if axis == 'height' else axis
    return df['t'].to_numpy(), df[column].to_numpy()
