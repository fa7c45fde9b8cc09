"""
European option pricing: analytical model and Monte Carlo engine.
"""
