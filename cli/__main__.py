"""
Entry point for running the CLI as a module: `python -m cli`

Examples:
  python -m cli inspect export.json
  python -m cli upgrade export.json --out upgraded.json --live-file-id lf-1
"""

from cli import main

if __name__ == "__main__":
    main()
