"""
lambdaclean - Prune stale published versions of AWS Lambda functions.

This package provides a CLI and a small engine that discovers functions by
name prefix or CloudFormation stack membership and keeps only the most
recent published versions of each.
"""

__version__ = "0.1.0"
