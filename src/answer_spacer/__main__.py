import sys

from answer_spacer.cli import main

if __name__ == "__main__":
    sys.exit(main())
