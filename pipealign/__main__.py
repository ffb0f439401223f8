"""Main entry point into pipealign."""

from pipealign.core.launch import main

if __name__ == "__main__":
    main()
