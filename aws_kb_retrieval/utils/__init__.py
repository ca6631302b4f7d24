"""Configuration, logging and exception utilities."""
