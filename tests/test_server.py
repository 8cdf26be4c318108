"""Tests for the sona HTTP routes, backed by file storage in a temp dir."""

import os
import random
import tempfile
import unittest

from fastapi.testclient import TestClient

from core.config import EngineConfig
from core.models import Item
from server import app as app_module
from server.csv_item_source import CsvItemSource
from server.file_storage import FileStorage

WORDS_CSV = """Estonian Word,English Translation,Difficulty
tere,hello,1
maja,house,2
koer,dog,3
kass,cat,2
"""


class ServerTestCase(unittest.TestCase):
    """Wires the app globals to temporary collaborators (startup is not run)."""

    words_csv = WORDS_CSV

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        words_file = os.path.join(self.tmp.name, 'words.csv')
        with open(words_file, 'w', encoding='utf-8') as f:
            f.write(self.words_csv)

        app_module.storage = FileStorage(
            config_file=os.path.join(self.tmp.name, 'config.json'),
            state_dir=self.tmp.name
        )
        app_module.item_source = CsvItemSource(words_file, distractor_count=2)
        app_module.engine_config = EngineConfig()
        app_module.rng = random.Random(0)
        app_module.user_histories.clear()
        app_module.user_progress.clear()
        app_module.drill_sessions.clear()
        self.client = TestClient(app_module.create_app())

    def tearDown(self):
        self.tmp.cleanup()

    def next_word(self, user_id: str = 'mari') -> dict:
        response = self.client.get('/api/next', params={'user_id': user_id})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def answer(self, item_key: str, answer: str, user_id: str = 'mari'):
        return self.client.post('/api/answer', json={
            'user_id': user_id, 'item_key': item_key, 'answer': answer
        })


class TestDrillRoutes(ServerTestCase):

    def test_health(self):
        response = self.client.get('/')
        self.assertEqual(response.json(), {'service': 'sona', 'status': 'ok'})

    def test_next_word_offers_choices(self):
        word = self.next_word()
        self.assertEqual(word['reason'], 'new')
        self.assertFalse(word['skipped_previous'])
        self.assertEqual(len(word['choices']), 3)
        translation = app_module.item_source.get_item(word['item_key']).translation
        self.assertIn(translation, word['choices'])

    def test_correct_answer_gains_difficulty_xp(self):
        word = self.next_word()
        item = app_module.item_source.get_item(word['item_key'])

        result = self.answer(word['item_key'], item.translation.upper()).json()

        self.assertTrue(result['correct'])
        self.assertEqual(result['xp_delta'], item.difficulty)
        # Level 0 needs no XP, so the first correct answer reaches level 1
        self.assertEqual(result['level'], 1)
        self.assertEqual(result['current_xp'], item.difficulty)
        self.assertEqual(result['xp_required'], 100)
        self.assertTrue(result['level_changed'])
        self.assertEqual(app_module.storage.load_history('mari')[0].correct_count, 1)

    def test_wrong_answer_loses_xp(self):
        word = self.next_word()
        result = self.answer(word['item_key'], 'definitely wrong').json()
        self.assertFalse(result['correct'])
        self.assertEqual(result['xp_delta'], -1)
        self.assertEqual(result['current_xp'], 0)
        self.assertEqual(result['level'], 0)

    def test_answer_without_pending_word(self):
        response = self.answer('maja', 'house')
        self.assertEqual(response.status_code, 400)

    def test_answer_for_other_word(self):
        word = self.next_word()
        other = 'tere' if word['item_key'] != 'tere' else 'maja'
        response = self.answer(other, 'whatever')
        self.assertEqual(response.status_code, 400)

    def test_unanswered_word_counts_as_wrong(self):
        first = self.next_word()
        second = self.next_word()
        self.assertTrue(second['skipped_previous'])
        history = app_module.storage.load_history('mari')
        self.assertEqual(history[0].item_key, first['item_key'])
        self.assertEqual(history[0].wrong_count, 1)

    def test_selection_state_persisted(self):
        self.next_word()
        state = app_module.storage.load_session_state('mari')
        self.assertEqual(state.call_count, 1)
        self.assertTrue(state.toggle)

    def test_struggles_report(self):
        word = self.next_word()
        self.answer(word['item_key'], 'nope')

        body = self.client.get('/api/struggles', params={'user_id': 'mari'}).json()

        self.assertEqual(body['total'], 1)
        row = body['words'][0]
        self.assertEqual(row['item_key'], word['item_key'])
        self.assertEqual(row['struggle_percent'], 100.0)
        self.assertEqual(row['struggle_percent_display'], '100%')
        self.assertEqual(row['translation'], app_module.item_source.get_item(word['item_key']).translation)

    def test_status(self):
        word = self.next_word()
        self.answer(word['item_key'], 'nope')
        status = self.client.get('/api/status', params={'user_id': 'mari'}).json()
        self.assertEqual(status['words_seen'], 1)
        self.assertEqual(status['struggled_words_count'], 1)
        self.assertEqual(status['session']['words_played'], 1)
        self.assertEqual(status['session']['experience_gained'], -1)

    def test_end_session(self):
        word = self.next_word()
        item = app_module.item_source.get_item(word['item_key'])
        self.answer(word['item_key'], item.translation)

        response = self.client.post('/api/session/end', json={'user_id': 'mari'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['words_guessed_correctly'], 1)

        again = self.client.post('/api/session/end', json={'user_id': 'mari'})
        self.assertEqual(again.status_code, 400)

        sessions = self.client.get('/api/sessions', params={'user_id': 'mari'}).json()
        self.assertEqual(len(sessions['sessions']), 1)
        self.assertEqual(sessions['total_experience_gained'], item.difficulty)

    def test_list_users(self):
        self.next_word('mari')
        self.assertEqual(self.client.get('/api/users').json(), {'users': ['mari']})


class TestCommaTranslations(ServerTestCase):

    words_csv = """Estonian Word,English Translation,Difficulty
olema,"to be, to exist",4
"""

    def test_full_choice_text_is_correct(self):
        word = self.next_word()
        self.assertEqual(word['choices'], ['to be, to exist'])
        result = self.answer('olema', word['choices'][0]).json()
        self.assertTrue(result['correct'])
        self.assertEqual(result['xp_delta'], 4)

    def test_single_alternative_is_correct(self):
        self.next_word()
        self.assertTrue(self.answer('olema', ' To Exist ').json()['correct'])

    def test_is_correct_answer(self):
        item = Item('olema', 'to be, to exist', 4)
        self.assertTrue(app_module.is_correct_answer(item, 'TO BE, TO EXIST'))
        self.assertTrue(app_module.is_correct_answer(item, 'to be'))
        self.assertFalse(app_module.is_correct_answer(item, 'to be, to'))
        self.assertFalse(app_module.is_correct_answer(item, ''))


class TestSessionHistory(ServerTestCase):

    def test_unknown_user_returns_404(self):
        response = self.client.get('/api/sessions', params={'user_id': 'tiit'})
        self.assertEqual(response.status_code, 404)

    def test_known_user_without_finished_sessions(self):
        self.next_word('mari')
        body = self.client.get('/api/sessions', params={'user_id': 'mari'}).json()
        self.assertEqual(body['sessions'], [])
        self.assertEqual(body['total_words_played'], 0)


class TestExhaustedWordList(ServerTestCase):

    words_csv = """Estonian Word,English Translation,Difficulty
tere,hello,1
"""

    def test_no_candidate_returns_404(self):
        word = self.next_word()
        self.answer(word['item_key'], 'hello')
        # Second call: toggle is on but nothing is struggled, and the only word is known
        response = self.client.get('/api/next', params={'user_id': 'mari'})
        self.assertEqual(response.status_code, 404)


class TestEngineConfigLoading(unittest.TestCase):

    def test_environment_overrides_file(self):
        os.environ['SONA_STRUGGLE_BARRIER'] = '0.5'
        try:
            config = app_module.load_engine_config({'struggle_barrier': 0.2, 'less_struggle_word_interval': 7})
        finally:
            del os.environ['SONA_STRUGGLE_BARRIER']
        self.assertEqual(config.struggle_barrier, 0.5)
        self.assertEqual(config.less_struggle_word_interval, 7)


if __name__ == '__main__':
    unittest.main()
