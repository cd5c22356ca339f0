"""Provider strategies shipped with passport_thegrid."""

from passport_thegrid.strategies.thegrid import TheGridStrategy

__all__ = ["TheGridStrategy"]
