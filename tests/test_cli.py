import logging

import pytest

from ghostwriter.cli import build_parser, main


@pytest.fixture
def story(tmp_path):
    path = tmp_path / 'story.txt'
    path.write_text('The cat sat.\n', encoding='utf-8')
    return path


def test_writes_story(story, capsys):
    assert main([str(story), '--words', '2', '--seed', '1']) == 0
    assert capsys.readouterr().out == ' The cat sat.\n\n'


def test_stats(story, capsys):
    assert main([str(story), '--words', '1', '--seed', '1', '--stats']) == 0
    out = capsys.readouterr().out
    assert out.startswith('num_tokens=6  vocab=2\n')


def test_dump(story, capsys):
    assert main([str(story), '--seed', '1', '--dump']) == 0
    out = capsys.readouterr().out
    assert 'Token hash table:' in out
    assert 'Trigram tree:' in out
    assert "(1.00) 'sat'" in out


def test_several_files(tmp_path, capsys):
    first = tmp_path / 'a.txt'
    second = tmp_path / 'b.txt'
    first.write_text('Hello there.', encoding='utf-8')
    second.write_text('Hello there.', encoding='utf-8')
    assert main([str(first), str(second), '--seed', '3', '--stats']) == 0
    # both files share one vocabulary
    assert capsys.readouterr().out.startswith('num_tokens=5  vocab=1\n')


def test_missing_file(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        assert main([str(tmp_path / 'missing.txt')]) == 1
    assert "Can't open input file" in caplog.text


def test_word_too_long(tmp_path, caplog):
    path = tmp_path / 'long.txt'
    path.write_text('abcdef', encoding='utf-8')
    with caplog.at_level(logging.ERROR):
        assert main([str(path), '--max-word-len', '3']) == 1
    assert 'Maximum word length (3) exceeded' in caplog.text


def test_requires_files():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_rejects_zero_words(story):
    with pytest.raises(SystemExit):
        main([str(story), '--words', '0'])


def test_defaults():
    args = build_parser().parse_args(['x.txt'])
    assert args.words == 500
    assert args.seed is None
