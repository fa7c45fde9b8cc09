#!/usr/bin/env python3
"""
Analytical vs Monte Carlo Demo - European Call and Put.

This example prices one European call/put pair two ways and compares them.

Key Concepts:
- Black-Scholes gives the exact price and raw Greeks in closed form
- Monte Carlo prices the call and put from one shared GBM sample
- MC error shrinks as 1/√N; the 95% CI should cover the analytical price
- Put-call parity is exact analytically, approximate under MC

Usage:
    python examples/01_analytical_vs_monte_carlo.py          # Full demo
    python examples/01_analytical_vs_monte_carlo.py --ci     # CI mode (fewer trials)
"""

import argparse
import logging
import sys

# Add src to path if running as script
sys.path.insert(0, "src")

from ito_pricing import (
    BlackScholesModel,
    ExecutionPolicy,
    MarketParameters,
    MonteCarloEngine,
    SimulationConfig,
    convergence_analysis,
)


def print_analytical(model: BlackScholesModel) -> None:
    """Print closed-form prices and Greeks."""
    print("\n" + "=" * 60)
    print("BLACK-SCHOLES (ANALYTICAL)")
    print("=" * 60)

    d1, d2 = model.compute_d()
    print(f"\n  d1 = {d1:.6f}   d2 = {d2:.6f}")
    print(f"\n  Call price: {model.call_price():10.4f}")
    print(f"  Put price:  {model.put_price():10.4f}")

    print("\n  {:<8} {:>12} {:>12}".format("Greek", "Call", "Put"))
    print("  " + "-" * 34)
    call, put = model.call_greeks(), model.put_greeks()
    for name in ("delta", "gamma", "vega", "theta", "rho"):
        print("  {:<8} {:>12.4f} {:>12.4f}".format(name, getattr(call, name), getattr(put, name)))


def print_monte_carlo(engine: MonteCarloEngine, model: BlackScholesModel) -> None:
    """Print the paired MC estimate next to the analytical values."""
    p = model.params
    result = engine.price_european_call_and_put(
        p.spot, p.strike, p.rate, p.volatility, p.time_to_maturity
    )

    print("\n" + "=" * 60)
    print(f"MONTE CARLO ({engine.n_trials:,} trials, seed={engine.seed})")
    print("=" * 60)

    for label, estimate, exact in (
        ("Call", result.call, model.call_price()),
        ("Put", result.put, model.put_price()),
    ):
        lower, upper = estimate.bounds
        status = "covered" if estimate.contains(exact) else "MISSED"
        print(
            f"\n  {label}: {estimate.price:.4f} ± {estimate.confidence_interval():.4f}"
            f"  [{lower:.4f}, {upper:.4f}]  BS={exact:.4f} ({status})"
        )

    print(f"\n  C - P (MC):      {result.parity_difference:.4f}")
    print(f"  S - K*e^(-rT):   {p.parity_value:.4f}")


def print_convergence(params: MarketParameters, trial_counts: tuple[int, ...]) -> None:
    """Print the convergence table."""
    analysis = convergence_analysis(params, trial_counts=trial_counts)

    print("\n" + "=" * 60)
    print("CONVERGENCE (call)")
    print("=" * 60)
    print("\n  {:>10} {:>10} {:>10} {:>10} {:>6}".format("N", "MC", "|error|", "SE", "in CI"))
    print("  " + "-" * 50)
    for row in analysis["results"]:
        print("  {:>10,} {:>10.4f} {:>10.4f} {:>10.4f} {:>6}".format(
            row["n_trials"],
            row["mc_price"],
            row["absolute_error"],
            row["standard_error"],
            "yes" if row["within_ci"] else "no",
        ))
    print(f"\n  SE log-log slope: {analysis['convergence_rate']:.3f} (theory: -0.5)")


def main() -> None:
    """Run analytical vs Monte Carlo demo."""
    parser = argparse.ArgumentParser(description="Analytical vs Monte Carlo Demo")
    parser.add_argument("--ci", action="store_true", help="CI mode (fewer trials)")
    parser.add_argument("--trials", type=int, default=1_000_000, help="MC trials (default: 1000000)")
    parser.add_argument(
        "--policy",
        choices=[p.value for p in ExecutionPolicy],
        default=ExecutionPolicy.AUTO.value,
        help="Execution policy (default: auto)",
    )
    parser.add_argument("--verbose", action="store_true", help="Show engine debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # Use fewer trials in CI mode
    n_trials = 20_000 if args.ci else args.trials
    trial_counts = (1_000, 5_000, 20_000) if args.ci else (1_000, 10_000, 100_000, 1_000_000)

    params = MarketParameters(
        spot=100.0, strike=100.0, rate=0.05, volatility=0.20, time_to_maturity=1.0
    )
    model = BlackScholesModel(params)
    engine = MonteCarloEngine(SimulationConfig(n_trials=n_trials, seed=42, policy=args.policy))

    print("\n" + "=" * 60)
    print("ANALYTICAL VS MONTE CARLO DEMO")
    print("=" * 60)
    print(f"\n  S={params.spot}  K={params.strike}  r={params.rate}  "
          f"σ={params.volatility}  T={params.time_to_maturity}")

    print_analytical(model)
    print_monte_carlo(engine, model)
    print_convergence(params, trial_counts)

    print("\n" + "=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)


if __name__ == "__main__":
    main()
