"""Cluster identity provider domain."""
