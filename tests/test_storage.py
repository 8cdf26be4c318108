"""Tests for the file storage and CSV item source collaborators."""

import os
import random
import tempfile
import unittest

from core.errors import NoCandidateAvailable
from core.models import LearnerProgress, PracticeSession, SelectionSessionState, WordAccuracyRecord
from server.csv_item_source import CsvItemSource
from server.file_storage import FileStorage

WORDS_CSV = """Estonian Word,English Translation,Difficulty
tere,hello,1
maja,house,2
Koer,dog,3
,orphan,1
kass,cat,not-a-number
vesi,water,2
"""


class TestFileStorage(unittest.TestCase):
    """Tests for FileStorage."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.storage = FileStorage(
            config_file=os.path.join(self.tmp.name, 'missing.json'),
            state_dir=self.tmp.name
        )

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_config_missing_file(self):
        self.assertEqual(self.storage.load_config(), {})

    def test_load_config(self):
        config_file = os.path.join(self.tmp.name, 'config.json')
        with open(config_file, 'w') as f:
            f.write('{"struggle_barrier": 0.4}')
        storage = FileStorage(config_file=config_file, state_dir=self.tmp.name)
        self.assertEqual(storage.load_config(), {'struggle_barrier': 0.4})

    def test_history_empty_for_new_user(self):
        self.assertEqual(self.storage.load_history('mari'), [])

    def test_record_answer(self):
        self.storage.record_answer('mari', 'maja', True)
        self.storage.record_answer('mari', 'maja', False)
        self.storage.record_answer('mari', 'koer', False)
        self.assertEqual(self.storage.load_history('mari'), [
            WordAccuracyRecord('maja', 1, 1),
            WordAccuracyRecord('koer', 0, 1)
        ])

    def test_progress_defaults_and_roundtrip(self):
        self.assertEqual(self.storage.load_progress('mari'), LearnerProgress())
        self.storage.save_progress('mari', LearnerProgress(3, 42))
        self.assertEqual(self.storage.load_progress('mari'), LearnerProgress(3, 42))

    def test_session_state(self):
        self.assertIsNone(self.storage.load_session_state('mari'))
        self.storage.save_session_state('mari', SelectionSessionState(5, True))
        state = self.storage.load_session_state('mari')
        self.assertEqual(state.call_count, 5)
        self.assertTrue(state.toggle)

    def test_state_sections_do_not_clobber_each_other(self):
        self.storage.record_answer('mari', 'maja', True)
        self.storage.save_progress('mari', LearnerProgress(1, 2))
        self.storage.save_session_state('mari', SelectionSessionState(1, True))
        self.assertEqual(self.storage.load_history('mari'), [WordAccuracyRecord('maja', 1, 0)])
        self.assertEqual(self.storage.load_progress('mari'), LearnerProgress(1, 2))

    def test_practice_sessions(self):
        session = PracticeSession()
        session.record(True, 2)
        self.storage.save_practice_session('mari', session)
        sessions = self.storage.load_practice_sessions('mari')
        self.assertEqual(len(sessions), 1)
        self.assertEqual(sessions[0]['words_played'], 1)
        self.assertEqual(sessions[0]['experience_gained'], 2)

    def test_corrupt_state_file_treated_as_empty(self):
        with open(os.path.join(self.tmp.name, 'sona_state_mari.json'), 'w') as f:
            f.write('{not json')
        self.assertEqual(self.storage.load_history('mari'), [])

    def test_list_users(self):
        self.storage.save_progress('default', LearnerProgress())
        self.storage.save_progress('mari', LearnerProgress())
        self.storage.save_progress('jaan', LearnerProgress())
        self.assertEqual(self.storage.list_users(), ['default', 'jaan', 'mari'])
        self.assertTrue(self.storage.user_exists('mari'))
        self.assertFalse(self.storage.user_exists('tiit'))


class TestCsvItemSource(unittest.TestCase):
    """Tests for CsvItemSource."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.words_file = os.path.join(self.tmp.name, 'words.csv')
        with open(self.words_file, 'w', encoding='utf-8') as f:
            f.write(WORDS_CSV)
        self.source = CsvItemSource(self.words_file, distractor_count=2)
        self.rng = random.Random(3)

    def tearDown(self):
        self.tmp.cleanup()

    def test_loads_rows_and_skips_blank_words(self):
        self.assertEqual([item.item_key for item in self.source.items], ['tere', 'maja', 'Koer', 'kass', 'vesi'])

    def test_bad_difficulty_defaults_to_one(self):
        self.assertEqual(self.source.get_item('kass').difficulty, 1)
        self.assertEqual(self.source.get_item('maja').difficulty, 2)

    def test_get_item_is_case_insensitive(self):
        item = self.source.get_item(' koer ')
        self.assertEqual(item.translation, 'dog')
        self.assertIsNone(self.source.get_item('puudub'))

    def test_fetch_respects_exclude(self):
        exclude = {'tere', 'maja', 'koer', 'kass'}
        chosen, distractors = self.source.fetch_candidate(exclude, rng=self.rng)
        self.assertEqual(chosen.item_key, 'vesi')
        self.assertEqual(len(distractors), 2)
        self.assertNotIn(chosen, distractors)

    def test_preferred_key_wins_over_exclude(self):
        chosen, _ = self.source.fetch_candidate({'maja'}, preferred_key='maja', rng=self.rng)
        self.assertEqual(chosen.item_key, 'maja')

    def test_unknown_preferred_key(self):
        with self.assertRaises(NoCandidateAvailable):
            self.source.fetch_candidate(set(), preferred_key='puudub', rng=self.rng)

    def test_exhausted(self):
        exclude = {'tere', 'maja', 'koer', 'kass', 'vesi'}
        with self.assertRaises(NoCandidateAvailable):
            self.source.fetch_candidate(exclude, rng=self.rng)

    def test_distractors_capped_by_list_size(self):
        source = CsvItemSource(self.words_file, distractor_count=10)
        chosen, distractors = source.fetch_candidate(set(), rng=self.rng)
        self.assertEqual(len(distractors), 4)


if __name__ == '__main__':
    unittest.main()
