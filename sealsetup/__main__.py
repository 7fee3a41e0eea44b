"""
Entry point for running SealSetup as a module.

Usage: python -m sealsetup [options]
"""

from sealsetup.cli.parser import main

if __name__ == "__main__":
    main()
