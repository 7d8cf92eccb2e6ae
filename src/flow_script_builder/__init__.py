"""Build pipeline for integration scripts: normalize, lint, compile, package."""
