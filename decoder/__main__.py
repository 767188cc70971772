"""
Decoder Module Entry Point
===========================

Allows running the Decoder CLI via: python -m decoder
"""

from decoder.cli import main

if __name__ == "__main__":
    main()
