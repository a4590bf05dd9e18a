# plot_metrics.py
import argparse
from pathlib import Path
import numpy as np
import matplotlib.pyplot as plt

from linkdiag.faults import FaultConfiguration
from linkdiag.monitor import LinkMonitor
from linkdiag.rng import RandomSource
from linkdiag.simulator import LinkSimulator


def collect(config: FaultConfiguration, steps: int, window: int, seed: int):
    """
    Run the monitor and return per-tick metric arrays plus diagnosis confidence.
    """
    sim = LinkSimulator(config=config, rng=RandomSource(seed=seed))
    mon = LinkMonitor(simulator=sim, window_size=window)
    mon.run(steps)
    t = np.array([s.t for s in mon.history])
    snr = np.array([s.snr_db for s in mon.history])
    ber = np.array([s.ber for s in mon.history])
    lat = np.array([s.latency_ms for s in mon.history])
    ret = np.array([s.retries for s in mon.history], dtype=np.float64)
    conf = np.array([r.diagnosis.confidence for r in mon.records])
    causes = [r.diagnosis.primary_cause.value for r in mon.records]
    return t, snr, ber, lat, ret, conf, causes, mon.agreement()


def render(config: FaultConfiguration, steps: int, window: int, seed: int, out_path: Path) -> float:
    """
    Plot one run to out_path and return its agreement figure.
    """
    t, snr, ber, lat, ret, conf, causes, agreement = collect(config, steps, window, seed)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, axes = plt.subplots(5, 1, figsize=(10, 11), sharex=True)
    axes[0].plot(t, snr, color="#60a5fa")
    axes[0].set_ylabel("SNR (dB)")
    axes[1].semilogy(t, np.maximum(ber, 1e-9), color="#fbbf24")
    axes[1].set_ylabel("BER")
    axes[2].plot(t, lat, color="#34d399")
    axes[2].set_ylabel("Latency (ms)")
    axes[3].step(t, ret, where="mid", color="#f87171")
    axes[3].set_ylabel("Retries")

    # colour confidence points by diagnosed cause
    if causes:
        labels = sorted(set(causes))
        for label in labels:
            mask = np.array([c == label for c in causes])
            axes[4].scatter(t[mask], conf[mask] * 100, s=8, label=label.replace("_", " "))
        axes[4].legend(loc="lower right", fontsize=8, ncol=min(len(labels), 4))
    axes[4].set_ylabel("Confidence (%)")
    axes[4].set_ylim(0, 105)
    axes[4].set_xlabel("Tick")

    for ax in axes:
        ax.grid(True, which="both", linestyle="--", linewidth=0.5, alpha=0.6)

    fig.suptitle(f"{config.describe()}  window={window}  agreement(last 40)={agreement * 100:.1f}%")
    fig.tight_layout()
    fig.savefig(out_path, dpi=180)
    plt.close(fig)
    return agreement


def main():
    ap = argparse.ArgumentParser(description="Plot simulated link metrics and diagnosis confidence.")
    ap.add_argument("--config", type=str, default="", help="fault knobs, e.g. 'fading=1.0,congestion=0.5'")
    ap.add_argument("--steps", type=int, default=240)
    ap.add_argument("--window", type=int, default=20)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--out", type=str, default="out/plots/link_metrics.png")
    args = ap.parse_args()

    out_path = Path(args.out)
    render(FaultConfiguration.parse(args.config), args.steps, args.window, args.seed, out_path)
    print(f"wrote {out_path}")


if __name__ == "__main__":
    main()
