"""nxaffected — find the Nx apps affected by a change, from inside CI."""

__version__ = "0.1.0"
