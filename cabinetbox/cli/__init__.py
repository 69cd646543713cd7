"""Command-line entry points for CabinetBox."""
