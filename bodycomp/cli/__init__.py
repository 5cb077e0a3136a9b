"""CLI module for bodycomp.

This module provides the command-line interface for table generation.
"""
