"""Dependency-light helpers shared by the pack builder (config files, logging)."""
