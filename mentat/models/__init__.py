"""Request models for the admin API."""
