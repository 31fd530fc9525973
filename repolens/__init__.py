"""
repolens: repository acquisition and README extraction.

Fetches a remote repository into a transient workspace, locates its
README and parses it into a document tree for downstream metric
analyzers.
"""

__version__ = "1.0.0"
__author__ = "repolens"
