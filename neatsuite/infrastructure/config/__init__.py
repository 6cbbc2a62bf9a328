"""Configuration loading from environment, .env and YAML files."""
