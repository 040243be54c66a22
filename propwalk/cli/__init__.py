"""Command line interface: `propwalk build` and `propwalk list`."""
