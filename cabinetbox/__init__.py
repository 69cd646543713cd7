"""CabinetBox - cabinet product catalogue import from e-commerce exports."""

__version__ = "0.1.0"
