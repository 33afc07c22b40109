"""Allow ``python -m meraghar``."""

from meraghar._cli import main

main()
