# main.py
"""
Демо полёта квадрокоптера: прогон программы целей и графики.

Запуск:
    python main.py                         # штатная программа, графики
    python main.py --wind --imprecision 5  # порывы ветра + разброс моторов
    python main.py --pitch 20 --no-plot --csv run.csv
"""
import argparse
import logging

import numpy as np
import matplotlib.pyplot as plt

from config import DEFAULT_CFG, Parameters, load_config, load_parameters
from logging_wrapper import setup_logging
from pid import ControlStrategy
from simulation import Simulation

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    p.add_argument('--height', type=float, default=1.0, help='целевая высота, м')
    p.add_argument('--yaw', type=float, default=0.0, help='целевое рыскание, град')
    p.add_argument('--pitch', type=float, default=10.0, help='целевой тангаж, град')
    p.add_argument('--roll', type=float, default=0.0, help='целевой крен, град')
    p.add_argument('--wind', action='store_true', help='включить случайный ветер')
    p.add_argument('--imprecision', type=float, default=0.0, help='разброс тяги моторов, %%')
    p.add_argument('--strategy', default=ControlStrategy.DOUBLE_PID.value,
                   choices=[s.value for s in ControlStrategy])
    p.add_argument('--config', help='JSON с переопределением физических констант')
    p.add_argument('--params', help='JSON с Parameters (важнее флагов выше)')
    p.add_argument('--seed', type=int, default=None)
    p.add_argument('--csv', help='сохранить историю в CSV')
    p.add_argument('--no-plot', action='store_true')
    p.add_argument('--verbose', action='store_true')
    return p.parse_args(argv)


def build_parameters(args):
    if args.params:
        return load_parameters(args.params)
    return Parameters(
        height_target=args.height, yaw_target=args.yaw,
        pitch_target=args.pitch, roll_target=args.roll,
        wind_active=args.wind, motor_imprecision_percent=args.imprecision,
        strategy=args.strategy,
    )


def plot_history(df):
    fig, (ax_h, ax_a) = plt.subplots(2, 1, figsize=(10, 6), sharex=True)
    ax_h.plot(df['t'], df['z'], lw=2.5, color='#0072BD', label='z')
    ax_h.set_ylabel('m'); ax_h.legend(); ax_h.grid(True)

    cols = ['#D95319', '#77AC30', '#7E2F8E']
    for name, col in zip(('yaw', 'pitch', 'roll'), cols):
        ax_a.plot(df['t'], np.rad2deg(df[name]), color=col, lw=2, label=name)
    ax_a.set_xlabel('t, s'); ax_a.set_ylabel('deg')
    ax_a.legend(); ax_a.grid(True)
    fig.suptitle('Полёт квадрокоптера')
    plt.show()


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)
    cfg = load_config(args.config) if args.config else DEFAULT_CFG

    sim = Simulation(build_parameters(args), cfg, seed=args.seed)
    ticks = sim.run()
    d = sim.drone
    logger.info("finished after %d ticks (t=%.1f s), state=%s, pos=%s",
                ticks, sim.time, d.state.value, np.round(d.pos.get_distances(), 3))

    df = sim.to_dataframe()
    if args.csv:
        df.to_csv(args.csv, index=False)
        logger.info("history saved to %s", args.csv)
    if not args.no_plot:
        plot_history(df)
    return sim


if __name__ == '__main__':
    main()
