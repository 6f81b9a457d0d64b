"""Entry point for `python -m kubefzf`."""

from kubefzf.tool.kubefzf import main

main()
