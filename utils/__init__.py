"""
Shared utilities: logging and input normalization
"""
