"""Package entry point for ``python -m snapshot_dump``.

WHY: Users run the dumper as
``python -m snapshot_dump -ss_dir <dir> -o <file>`` when the console
script is not on PATH.

HOW: Delegates to the CLI's main() and exits with its return code.

RULES:
- This file must exist for ``python -m snapshot_dump`` to work
- Exit code comes from cli.main(): 0 on success, 1 on any error
"""

import sys

if __name__ == "__main__":
    from snapshot_dump.cli import main
    sys.exit(main())
