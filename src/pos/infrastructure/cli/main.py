import click

from pos.infrastructure.bootstrap import setup_logging
from pos.infrastructure.cli.catalog_commands import catalog_list
from pos.infrastructure.cli.sale_commands import sale_demo, sale_run


@click.group()
def cli() -> None:
    """POS — point-of-sale register"""
    setup_logging()


# Register subcommands
cli.add_command(catalog_list)
cli.add_command(sale_demo)
cli.add_command(sale_run)
