"""
Entry point for python -m toolprobe
"""

from toolprobe.cli import main


if __name__ == "__main__":
    main()
