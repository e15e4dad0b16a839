"""Filesystem helpers shared by the domain and GUI layers."""
