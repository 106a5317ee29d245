"""Allow ``python -m gitstat``."""

from gitstat.cli import main


if __name__ == "__main__":
    main(prog_name="gitstat")
