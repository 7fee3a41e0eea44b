"""
Entry point for running the SealSetup CLI as a module.

Usage: python -m sealsetup.cli [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
