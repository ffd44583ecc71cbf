"""CLI subcommands registered on the jarscout app."""
