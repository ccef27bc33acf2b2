"""clinic-cache: dual-tier TTL cache for clinic profile, appointment and clinic data."""

__version__ = "1.0.0"
