"""
Lint script runner.

Runs flake8 and then pylint over the water package and CLI. Both tools run
even if the first one reports problems; the exit status is non-zero when
either does.
"""
import subprocess
import sys

TARGETS = ["./waterlang", "./water.py"]
MAX_LINE_LENGTH = "--max-line-length=110"


def main() -> int:
    """
    Lint the water project using flake8 and pylint.
    """
    print("Running flake8...")
    flake8 = subprocess.run(
        ["flake8", *TARGETS, MAX_LINE_LENGTH, "--exclude=waterlang/tests"],
        check=False,
    )

    print("Running pylint...")
    pylint = subprocess.run(
        ["pylint", *TARGETS, MAX_LINE_LENGTH, "--ignore=tests"],
        check=False,
    )

    return 1 if flake8.returncode or pylint.returncode else 0


if __name__ == "__main__":
    sys.exit(main())
