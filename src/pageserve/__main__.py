from pageserve.cli import cli

cli()
