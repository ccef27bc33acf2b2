"""Core Layer: domain wrappers and command orchestration."""
