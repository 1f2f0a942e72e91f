"""Simulated fleet of aerial units: tick engine, task queues and formations."""

__version__ = "0.1.0"
