"""Squadboard: mission control for a squad of AI agents."""
