import numpy as np
import matplotlib.pyplot as plt

from fitlab.models import DECAY_MODEL, make_decay_samples
from fitlab.optimize import optimize
from fitlab.weighting import compute_weights

# Heavily clustered sampling: 40 points in the first time unit, 8 after
rng = np.random.default_rng(7)
times = np.sort(np.concatenate([rng.uniform(0, 1, 40), np.linspace(2, 10, 8)]))
true_params = np.array([0.5, 2.0, 0.2, 3.0, 1.0])
samples = make_decay_samples(true_params, times, noise=0.1, seed=7)

weights = compute_weights(samples["t"])
print(f"Weight range: {weights.min():.4f} .. {weights.max():.4f} (uniform would be {1 / len(times):.4f})")

spans = np.array([high - low for low, high in DECAY_MODEL.bounds])
fits = {}
for label, bandwidth in [("density", None), ("near-uniform", 1e3)]:
    # A huge bandwidth makes every density equal, i.e. plain RMS
    result = optimize(
        x0=DECAY_MODEL.get_default_params(),
        bounds=DECAY_MODEL.bounds,
        aux_data=samples,
        iters=4000,
        maximize=False,
        alpha0=0.25 * spans,
        bandwidth=bandwidth,
        seed=1,
    )
    fits[label] = result
    print(f"{label:>13}: {DECAY_MODEL.as_dict(result.best_params)}")

# --- Plot ---
fig, ax = plt.subplots(figsize=(12, 6))
ax.scatter(samples["t"], samples["y"], s=3000 * weights, alpha=0.6, edgecolor="black", label="Samples (area = weight)")
t_curve = np.linspace(0, 10, 400)
ax.plot(t_curve, DECAY_MODEL.predict(true_params, t_curve), color="black", linestyle="--", label="True")
for label, result in fits.items():
    ax.plot(t_curve, DECAY_MODEL.predict(result.best_params, t_curve), linewidth=1.5, label=f"Fit ({label})")
ax.set_xlabel("t")
ax.set_ylabel("y")
ax.set_title("Density-weighted vs unweighted decay fit")
ax.legend()
ax.grid(alpha=0.3)
plt.tight_layout()
plt.show()
