"""ROSA cluster domain."""
