"""Configuration layer: option models, TOML discovery, unified settings, logging."""
