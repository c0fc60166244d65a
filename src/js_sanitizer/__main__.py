"""Allow ``python -m js_sanitizer``."""

from js_sanitizer.cli import main

if __name__ == "__main__":
    main()
