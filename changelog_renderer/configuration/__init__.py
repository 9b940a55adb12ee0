"""Configuration models, loading and the command line interface."""
