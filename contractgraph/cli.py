"""
Command line interface for the contractgraph library.
"""

import sys
import random

import click

from contractgraph.loggingconfig import logger
from contractgraph.config import CONFIRMATION_THRESHOLD
from contractgraph.exceptions import ContractGraphException
from contractgraph.contract import ContractGraph
from contractgraph.graphics import generate_graphviz
from contractgraph.commands.info import get_info
from contractgraph.commands.unreachable import get_unreachable
from contractgraph.commands.status import get_status

INFINITY = float("inf")

def load_contract(path, seed=None):
    """
    Load a contract or exit with an error.
    """
    rng = None
    if seed is not None:
        rng = random.Random(seed)

    try:
        return ContractGraph.from_file(path, rng=rng)
    except (ContractGraphException, OSError, ValueError) as exc:
        logger.error(f"Error: can't load contract: {exc}")
        sys.exit(1)

@click.group()
def cli():
    pass

@cli.command()
@click.argument("path", required=False)
def info(path):
    """
    Display the transactions and outputs of a contract.
    """
    contract = load_contract(path)
    click.echo(get_info(contract))

@cli.command()
@click.argument("path", required=False)
@click.option("--max-time", type=float, default=INFINITY, help="Horizon as a UNIX timestamp.")
@click.option("--max-height", type=float, default=INFINITY, help="Horizon as a block height.")
@click.option("--start-time", type=int, default=0, help="Time at which the contract starts.")
@click.option("--start-height", type=int, default=0, help="Height at which the contract starts.")
@click.option("--seed", type=int, default=None, help="Seed for the merge order (results are identical).")
def unreachable(path, max_time, max_height, start_time, start_height, seed):
    """
    List the transactions that can't be valid by the given time and height.
    """
    contract = load_contract(path, seed=seed)
    click.echo(get_unreachable(contract, max_time, max_height, start_time=start_time, start_height=start_height))

@cli.command()
@click.argument("path", required=False)
@click.option("--threshold", type=int, default=CONFIRMATION_THRESHOLD, help="Confirmations required.")
def status(path, threshold):
    """
    Check bitcoind for confirmed transactions and list what can be broadcast.
    """
    contract = load_contract(path)
    click.echo(get_status(contract, threshold=threshold))

@cli.command()
@click.argument("path", required=False)
@click.option("--output", default="contract.gv", help="Where to write the dot file.")
@click.option("--max-time", type=float, default=INFINITY)
@click.option("--max-height", type=float, default=INFINITY)
def graph(path, output, max_time, max_height):
    """
    Write a graphviz dot file of the contract. Transactions unreachable by the
    given horizon are greyed out.
    """
    contract = load_contract(path)
    unreachable = contract.unreachable_within(max_time, max_height)
    diagram = generate_graphviz(contract, output_filename=output, unreachable=unreachable)
    diagram.save()
    logger.info(f"Wrote to {output}")
