"""Stochastic resolvers used by the engagement loop."""
