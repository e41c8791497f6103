"""
ScoreStore Tests

Save-if-higher semantics for the in-memory and JSON file stores.

Run with: pytest tests/test_scores.py -v
"""

import json

import pytest

from retro_arcade.scores import JsonScoreStore, MemoryScoreStore


@pytest.fixture(params=['memory', 'json'])
def store(request, tmp_path):
    if request.param == 'memory':
        return MemoryScoreStore()
    return JsonScoreStore(tmp_path / 'scores.json')


class TestScoreStoreContract:
    """Behavior shared by every store."""

    def test_unknown_game_is_zero(self, store):
        """Games with no stored score report 0."""
        assert store.get('never-played') == 0

    def test_higher_score_is_saved(self, store):
        """A score above the current high score is saved and reported as a record."""
        assert store.set('snake', 120) is True
        assert store.get('snake') == 120

    def test_lower_score_is_ignored(self, store):
        """set 100 then 50 leaves 100."""
        store.set('g', 100)
        assert store.set('g', 50) is False
        assert store.get('g') == 100

    def test_equal_score_is_not_a_record(self, store):
        """Only a strictly greater score counts."""
        store.set('g', 100)
        assert store.set('g', 100) is False

    def test_zero_is_not_a_record(self, store):
        """A zero score never beats the default."""
        assert store.set('g', 0) is False

    def test_games_are_independent(self, store):
        """Scores are keyed by game identifier."""
        store.set('snake', 10)
        store.set('pong', 3)
        assert store.get('snake') == 10
        assert store.get('pong') == 3


class TestMemoryScoreStore:
    """In-memory specifics."""

    def test_initial_scores(self):
        """Initial scores can be seeded."""
        store = MemoryScoreStore({'tetris': 900})
        assert store.get('tetris') == 900
        assert store.set('tetris', 800) is False


class TestJsonScoreStore:
    """File-backed specifics."""

    def test_persists_across_instances(self, tmp_path):
        """A new store on the same file sees earlier records."""
        path = tmp_path / 'scores.json'
        JsonScoreStore(path).set('snake', 70)
        assert JsonScoreStore(path).get('snake') == 70

    def test_file_is_a_json_object(self, tmp_path):
        """Scores are written as a JSON object."""
        path = tmp_path / 'scores.json'
        store = JsonScoreStore(path)
        store.set('pong', 4)
        store.set('snake', 30)
        assert json.loads(path.read_text()) == {'pong': 4, 'snake': 30}

    def test_creates_parent_directory(self, tmp_path):
        """Missing parent directories are created on first write."""
        path = tmp_path / 'nested' / 'dir' / 'scores.json'
        JsonScoreStore(path).set('snake', 1)
        assert path.exists()

    def test_corrupt_file_is_treated_as_empty(self, tmp_path):
        """An unreadable file reads as no scores and is replaced on write."""
        path = tmp_path / 'scores.json'
        path.write_text('{not json')
        store = JsonScoreStore(path)
        assert store.get('snake') == 0
        assert store.set('snake', 5) is True
        assert json.loads(path.read_text()) == {'snake': 5}

    def test_non_object_file_is_treated_as_empty(self, tmp_path):
        """A JSON array is ignored."""
        path = tmp_path / 'scores.json'
        path.write_text('[1, 2, 3]')
        assert JsonScoreStore(path).get('snake') == 0

    def test_bad_values_are_skipped(self, tmp_path):
        """Non-integer entries are dropped, valid ones kept."""
        path = tmp_path / 'scores.json'
        path.write_text(json.dumps({'snake': 'lots', 'pong': '7'}))
        store = JsonScoreStore(path)
        assert store.get('snake') == 0
        assert store.get('pong') == 7

    def test_no_temp_files_left(self, tmp_path):
        """Writes leave only the score file behind."""
        path = tmp_path / 'scores.json'
        JsonScoreStore(path).set('snake', 3)
        assert [p.name for p in tmp_path.iterdir()] == ['scores.json']

    def test_failed_write_keeps_previous_score(self, tmp_path):
        """A record that cannot be saved is not reported by get()."""
        blocker = tmp_path / 'not-a-dir'
        blocker.write_text('')
        store = JsonScoreStore(blocker / 'scores.json')

        with pytest.raises(OSError):
            store.set('g', 100)

        assert store.get('g') == 0
        # 50 beats the saved 0, so the store tries (and fails) to write again
        with pytest.raises(OSError):
            store.set('g', 50)

    def test_failed_write_after_success_keeps_saved_score(self, tmp_path, monkeypatch):
        """An error during the rename leaves the last saved score in place."""
        path = tmp_path / 'scores.json'
        store = JsonScoreStore(path)
        store.set('g', 10)

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr('retro_arcade.scores.os.replace', fail_replace)
        with pytest.raises(OSError):
            store.set('g', 99)

        assert store.get('g') == 10
        assert json.loads(path.read_text()) == {'g': 10}
        assert [p.name for p in tmp_path.iterdir()] == ['scores.json']
