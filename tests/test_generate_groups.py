"""
Tests for the generate_groups command line script.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from generate_groups import create_tournament, format_tournament, load_entrants, main


@pytest.fixture
def entrants_file(tmp_path):
    path = tmp_path / 'entrants.yaml'
    path.write_text("\n".join(f"- Player {i}" for i in range(1, 9)) + "\n")
    return str(path)


class TestLoadEntrants:
    def test_list(self, entrants_file):
        assert load_entrants(entrants_file)[:2] == ['Player 1', 'Player 2']

    def test_mapping_and_blanks(self, tmp_path):
        path = tmp_path / 'entrants.yaml'
        path.write_text("entrants:\n  - Ann\n  - ''\n  - \n  - Bob\n")
        assert load_entrants(str(path)) == ['Ann', 'Bob']


class TestFormat:
    def test_groups_and_rounds(self):
        tournament = create_tournament(['A', 'B', 'C', 'D'], seed=1)
        lines = format_tournament(tournament)
        assert lines[0] == '# Group A'
        assert lines.count('Round 1') == 1
        assert sum(1 for line in lines if ' vs ' in line) == 6

    def test_direct_final(self):
        lines = format_tournament(create_tournament(['A', 'B']))
        assert lines == ['# Grand Final', 'A vs B']


class TestMain:
    def test_prints_schedule(self, entrants_file, capsys):
        assert main([entrants_file, '--seed', '4', '--name', 'Club Night']) == 0
        out = capsys.readouterr().out
        assert '# Group A' in out
        assert '# Group B' in out
        assert out.count(' vs ') == 12

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / 'missing.yaml')]) == 1
        assert 'not found' in capsys.readouterr().err

    def test_too_few_entrants(self, tmp_path, capsys):
        path = tmp_path / 'entrants.yaml'
        path.write_text("- Solo\n")
        assert main([str(path), '--settings', str(tmp_path / 'none.yaml')]) == 1
        assert 'Error' in capsys.readouterr().err
