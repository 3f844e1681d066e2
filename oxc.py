#!/usr/bin/env python3
"""oxc — transpiles Onyx to C.

Thin entry point that delegates to src.compiler.python.main.
"""

from src.compiler.python.main import main

if __name__ == "__main__":
    main()
