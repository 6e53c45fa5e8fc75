# evolution_engine/plotting.py - Population chart for finished runs (headless)

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .agents import Variant

VARIANT_COLORS = {
    Variant.GRAZER: '#33cc99',
    Variant.HUNTER: '#cc3333',
    Variant.CANNIBAL: '#991a99',
}


def plot_population(history, filename, dt=None):
    """
    Writes a line chart of per-variant counts to filename.
    history is an array of (tick, grazers, hunters, cannibals) rows.
    """
    fig, ax = plt.subplots(figsize=(10, 5))
    ticks = history[:, 0] * dt if dt else history[:, 0]
    for column, variant in enumerate(Variant, start=1):
        ax.plot(ticks, history[:, column], label=variant.name.title(), color=VARIANT_COLORS[variant])
    ax.set_xlabel("Simulated seconds" if dt else "Tick")
    ax.set_ylabel("Live agents")
    ax.set_title("Population by variant")
    ax.legend(loc='upper right')
    ax.grid(alpha=0.3)
    fig.tight_layout()
    fig.savefig(filename, dpi=100)
    plt.close(fig)
    return filename
