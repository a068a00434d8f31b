"""Configuration parsing and host resolution engine."""
