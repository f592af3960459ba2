"""Allow ``python -m expressgen``."""

from expressgen.cli import main

main()
