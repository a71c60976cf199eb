# -*- coding: utf-8 -*-

import json
import pytest
from click.testing import CliRunner
from shardstore import fingerprint
from shardstore.cli.cli import cli

KEY = fingerprint('test')


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def root(tmpdir):
    return str(tmpdir.join('cli_root'))


@pytest.fixture
def shardfile(tmpdir):
    infile = tmpdir.join('shard.bin')
    infile.write_binary(b'shard bytes')
    return str(infile)


def invoke(runner, root, *args):
    result = runner.invoke(cli, [root] + list(args))
    return result


def test_cli_put_peek(runner, root, tmpdir):
    recordfile = tmpdir.join('record.json')
    recordfile.write(json.dumps({'meta': {'note': 'x'}, 'fskey': 'ignored'}))

    result = invoke(runner, root, 'put', KEY, '--record', str(recordfile))
    assert result.exit_code == 0, result.output
    assert fingerprint(KEY) in result.output

    result = invoke(runner, root, 'peek', KEY)
    assert result.exit_code == 0, result.output
    record = json.loads(result.output)
    assert record['meta'] == {'note': 'x'}
    assert record['fskey'] == fingerprint(KEY)
    assert record['shard'] is None


def test_cli_upload_cat(runner, root, shardfile):
    assert invoke(runner, root, 'put', KEY).exit_code == 0

    result = invoke(runner, root, 'upload', KEY, shardfile)
    assert result.exit_code == 0, result.output

    result = invoke(runner, root, 'cat', KEY)
    assert result.exit_code == 0
    assert result.stdout_bytes == b'shard bytes'

    result = invoke(runner, root, 'upload', KEY, shardfile)
    assert result.exit_code == 1


def test_cli_cat_without_shard(runner, root):
    assert invoke(runner, root, 'put', KEY).exit_code == 0
    result = invoke(runner, root, 'cat', KEY)
    assert result.exit_code == 1


def test_cli_size(runner, root, shardfile):
    invoke(runner, root, 'put', KEY)
    invoke(runner, root, 'upload', KEY, shardfile)

    result = invoke(runner, root, 'size', '--bytes')
    assert result.exit_code == 0
    assert result.output.strip() == str(len(b'shard bytes'))

    result = invoke(runner, root, 'size')
    assert result.exit_code == 0
    assert 'Bytes' in result.output


def test_cli_keys_delete(runner, root):
    keys = [fingerprint(str(i)) for i in range(3)]
    for key in keys:
        assert invoke(runner, root, 'put', key).exit_code == 0

    result = invoke(runner, root, 'keys')
    assert sorted(result.output.split()) == sorted(keys)

    result = invoke(runner, root, 'delete', keys[0], KEY)
    assert result.exit_code == 0
    assert 'delete: {0}: True'.format(keys[0]) in result.output
    assert 'delete: {0}: False'.format(KEY) in result.output

    result = invoke(runner, root, 'keys')
    assert sorted(result.output.split()) == sorted(keys[1:])


def test_cli_flush(runner, root):
    result = invoke(runner, root, 'flush')
    assert result.exit_code == 0


def test_cli_peek_missing(runner, root):
    result = invoke(runner, root, 'peek', KEY)
    assert result.exit_code != 0
