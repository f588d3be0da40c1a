"""Command-line interface for ripple STL generation."""
