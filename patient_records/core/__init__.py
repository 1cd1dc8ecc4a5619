"""Configuration, security, logging, and metrics."""
