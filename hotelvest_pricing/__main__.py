"""Allow ``python -m hotelvest_pricing``."""
from .cli import main

if __name__ == "__main__":
    main()
