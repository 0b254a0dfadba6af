"""
Main CLI entry point for diskstore.
"""

import logging

import click

from diskstore.core import ByteArray, ByteArrayFactory, StoreConfig
from diskstore.storage import DiskDatabase

compression_option = click.option(
    "--compression/--no-compression",
    default=False,
    help="Records are zstd compressed",
)


def open_store(path: str, compression: bool) -> DiskDatabase:
    """Build and load a store for a CLI command."""
    database = DiskDatabase.from_config(StoreConfig(path=path, use_compression=compression))
    database.load()
    return database


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """diskstore - File-per-record key-value store."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@compression_option
def info(path, compression):
    """Show store location, compression and record count."""
    database = open_store(path, compression)
    click.echo(f"Path: {database.path}")
    click.echo(f"Compression: {'zstd' if database.use_compression else 'none'}")
    click.echo(f"Records: {database.count}")


@cli.command()
@click.argument("path", type=click.Path(file_okay=False))
@click.argument("key", type=str)
@click.argument("source", type=click.File("rb"))
@compression_option
@click.option("--overwrite", is_flag=True, help="Replace an existing record")
def put(path, key, source, compression, overwrite):
    """Store the bytes of SOURCE under KEY."""
    database = open_store(path, compression)
    value = ByteArray(key=key, data=source.read())

    result = database.upsert(value) if overwrite else database.add(value)
    if not result.ok:
        raise click.ClickException(f"Could not store {key}: {result.status.value}")
    click.echo(f"Stored {value.byte_size} bytes under {key}")


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.argument("key", type=str)
@click.option("--size", required=True, type=click.IntRange(min=0), help="Record size in bytes")
@click.option("--output", "-o", type=click.File("wb"), default=None, help="Write to file instead of stdout")
@compression_option
def get(path, key, size, output, compression):
    """Print the record stored under KEY."""
    database = open_store(path, compression)
    result = database.get(key, ByteArrayFactory(size, key=key))
    if not result.ok:
        raise click.ClickException(f"Could not read {key}: {result.status.value}")

    stream = output if output is not None else click.get_binary_stream("stdout")
    stream.write(result.value.data)
    stream.flush()


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@click.argument("key", type=str)
@compression_option
def rm(path, key, compression):
    """Remove the record stored under KEY."""
    database = open_store(path, compression)
    result = database.remove(key)
    if not result.ok:
        raise click.ClickException(f"Could not remove {key}: {result.status.value}")
    click.echo(f"Removed {key} ({database.count} records left)")


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@compression_option
@click.confirmation_option(prompt="Delete every record in the store?")
def clear(path, compression):
    """Delete every record in the store."""
    database = open_store(path, compression)
    deleted = database.clear()
    click.echo(f"Deleted {deleted} records")
    if database.count:
        raise click.ClickException(f"{database.count} records could not be deleted")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
