import logging
import re

import pytest

from chordlift.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger('chordlift')
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert 'demo' in capsys.readouterr().out


def test_demo_parser_defaults():
    args = build_parser().parse_args(['demo'])
    assert args.points == 10
    assert args.ticks == 600
    assert (args.res_a, args.res_b) == (400, 400)
    assert args.surface_stl is None


def test_demo_writes_meshes(tmp_path, capsys):
    surface = tmp_path / 'surface.stl'
    band = tmp_path / 'band.stl'
    rc = main(['demo', '--seed', '3', '--ticks', '30', '--res-a', '6', '--res-b', '5',
               '--surface-stl', str(surface), '--band-stl', str(band)])
    out = capsys.readouterr().out
    assert rc == 0
    assert re.search(r'trail: \d+ points', out)
    for path in (surface, band):
        size = path.stat().st_size
        assert size > 84
        assert (size - 84) % 50 == 0


def test_demo_ascii(tmp_path):
    surface = tmp_path / 'surface.stl'
    rc = main(['demo', '--seed', '1', '--ticks', '2', '--res-a', '2', '--res-b', '2',
               '--surface-stl', str(surface), '--ascii'])
    assert rc == 0
    assert surface.read_text().startswith('solid chordlift surface')


def test_demo_rejects_tiny_loop(capsys):
    assert main(['demo', '--points', '2']) == 1
    assert 'Error' in capsys.readouterr().err
