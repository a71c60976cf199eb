#!/usr/bin/env python3

import json
import logging
import shutil
import sys

import click
import humanize

from shardstore import FileStorageAdapter
from shardstore import NotFoundError


@click.group()
@click.argument("root", type=click.Path(file_okay=False, resolve_path=True), nargs=1)
@click.option('--width', type=click.IntRange(1, 4), default=2)
@click.option('--verbose', is_flag=True)
@click.pass_context
def cli(ctx, root, width, verbose):
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    ctx.obj = FileStorageAdapter(root, width=width)
    if verbose:
        print(ctx.obj, file=sys.stderr)


@cli.command()
@click.argument("key", type=str)
@click.option("--record", type=click.File(mode='r'))
@click.pass_obj
def put(obj, key, record):
    item = json.load(record) if record else {}
    obj.put(key, item)
    print("put:", key, obj.peek(key).fskey)


@cli.command()
@click.argument("key", type=str)
@click.argument("infile", type=click.File(mode='rb'))
@click.pass_obj
def upload(obj, key, infile):
    item = obj.get(key)
    if item.shard.writable():
        with item.shard as shard:
            shutil.copyfileobj(infile, shard)
        print("upload:", key, item.fskey)
    else:
        item.shard.close()
        print("upload:", key, "shard already stored", file=sys.stderr)
        sys.exit(1)


@cli.command()
@click.argument("key", type=str)
@click.pass_obj
def cat(obj, key):
    item = obj.get(key)
    if item.shard.writable():
        item.shard.discard()
        print("cat:", key, "no shard stored", file=sys.stderr)
        sys.exit(1)
    with item.shard as shard:
        shutil.copyfileobj(shard, sys.stdout.buffer)


@cli.command()
@click.argument("key", type=str)
@click.pass_obj
def peek(obj, key):
    record = obj.peek(key).to_record()
    print(json.dumps(record, indent=2, sort_keys=True))


@cli.command()
@click.argument("keys", type=str, nargs=-1)
@click.pass_obj
def delete(obj, keys):
    for key in keys:
        try:
            obj.delete(key)
            ans = True
        except NotFoundError:
            ans = False
        print("delete:", key + ':', ans)


@cli.command()
@click.pass_obj
def keys(obj):
    for key in obj.keys():
        print(key)


@cli.command()
@click.argument("key", type=str, required=False)
@click.option('--bytes', 'as_bytes', is_flag=True)
@click.pass_obj
def size(obj, key, as_bytes):
    used = obj.size(key)
    if as_bytes:
        print(used)
    else:
        print(humanize.naturalsize(used))


@cli.command()
@click.pass_obj
def flush(obj):
    obj.flush()


def main():
    cli(auto_envvar_prefix='SHARDSTORE')


if __name__ == '__main__':
    main()
