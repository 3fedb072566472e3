"""Engine that turns SAP GUI query templates into dated, uniquely named package files."""

__version__ = "0.1.0"

__all__ = ["__version__"]
