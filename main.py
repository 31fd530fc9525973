#!/usr/bin/env python3
"""
repolens - Main Entry Point

Fetches repositories into transient workspaces and extracts their
README documents for downstream metric analysis.
"""

from repolens.cli import main

if __name__ == "__main__":
    main()
