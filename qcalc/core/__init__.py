"""Core quaternion engine and calculator logic."""
