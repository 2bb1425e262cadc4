from gnvctl.cli import cli

cli()
