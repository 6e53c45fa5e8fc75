# Simulation runner: batch of independent evolutions with chronicle + chart output

import csv
import argparse
import os
import numpy as np
from evolution_engine.world import World, CHRONICLE_HEADER
from evolution_engine.plotting import plot_population
import evolution_engine.config as cfg


def save_chronicle(chronicle_data: np.ndarray, run_number: int, out_dir="chronicles"):
    """Saves the final chronicle data to a CSV file."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"run_{run_number}_chronicle.csv")

    with open(filename, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CHRONICLE_HEADER)
        writer.writerows(chronicle_data.tolist())
    print(f"Successfully saved chronicle to {filename}")
    return filename


def save_population_plot(world: World, run_number: int, out_dir="chronicles"):
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"run_{run_number}_population.png")
    plot_population(world.history_array(), filename, dt=world.dt)
    print(f"Population chart saved to {filename}")
    return filename


def main(num_evolutions: int, ticks: int, seed=None, out_dir="chronicles"):
    """
    Runs a specified number of separate, independent evolution simulations.
    """
    print(f"--- Preparing to run {num_evolutions} evolution(s). ---")

    for run_number in range(1, num_evolutions + 1):
        print(f"\n--- Starting Evolution #{run_number}/{num_evolutions} ---")

        run_seed = None if seed is None else seed + run_number - 1
        world = World(seed=run_seed)

        final_chronicle = world.run(ticks)

        if len(final_chronicle) > 0:
            save_chronicle(final_chronicle, run_number, out_dir)
        else:
            print("Simulation resulted in an empty chronicle. Nothing to save.")
        save_population_plot(world, run_number, out_dir)

        print(f"--- Evolution #{run_number} Complete ---")


def build_parser():
    parser = argparse.ArgumentParser(description="Run the predator/prey/cannibal evolution simulation.")
    parser.add_argument("num_evolutions", type=int, nargs='?', default=cfg.MAX_SIMULATION_RUNS)
    parser.add_argument("--ticks", type=int, default=cfg.MAX_TICKS_PER_RUN)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--out-dir", default="chronicles")
    return parser


def parse_args(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.num_evolutions < 1 or args.ticks < 1:
        parser.error("num_evolutions and --ticks must be positive")
    return args


if __name__ == "__main__":
    args = parse_args()
    main(args.num_evolutions, args.ticks, args.seed, args.out_dir)
