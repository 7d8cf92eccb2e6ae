"""Packaged build resources."""
