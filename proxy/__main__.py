from proxy.main import cli

cli()
