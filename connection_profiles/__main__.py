"""Entry point for running the profile CLI with python -m connection_profiles."""

from .cli import main

if __name__ == "__main__":
    main()
