from srcmodel.cli.main import cli

cli()
