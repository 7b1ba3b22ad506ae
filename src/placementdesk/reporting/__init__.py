"""Statistics, console output and exports."""
