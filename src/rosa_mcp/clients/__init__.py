"""Clients for the OCM backend."""
