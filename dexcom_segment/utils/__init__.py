"""Configuration, logging, templating and error helpers."""
