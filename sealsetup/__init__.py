"""
SealSetup - install the seal runtime in CI workflows.

Resolves a seal release for the host platform, installs it from the tool
cache or a fresh download, and publishes it on PATH.
"""

__version__ = "0.1.0"
