"""MCP prompts for ROSA HCP workflows."""
