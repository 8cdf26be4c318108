"""Console UI for sona application."""

import requests

from core.config import LANGUAGE
from cli.api_client import SonaAPIClient

REASON_LABELS = {
    'eased': 'review',
    'struggled': 'practice',
    'new': 'new word'
}


class ConsoleUI:
    """Console user interface for sona application."""

    def __init__(self, client: SonaAPIClient):
        self.client = client

    def print_status(self, status: dict):
        """Print detailed status."""
        session = status['session']
        print('\n' + '=' * 50)
        print('STATUS SUMMARY')
        print('=' * 50)
        print(f'\nLanguage: {status["language"]}')
        print(f'Level {status["level"]}: {status["current_xp"]}/{status["xp_required"]} XP')
        print(f'Words seen: {status["words_seen"]}')
        print(f'Words to practice: {status["struggled_words_count"]}')
        print(f'\nThis session: {session["words_guessed_correctly"]}/{session["words_played"]} correct, '
              f'{session["experience_gained"]:+d} XP, {session["time_played"]} min')
        print('\n' + '=' * 50 + '\n')

    def print_struggles(self, struggles: dict):
        """Print the words needing the most practice."""
        if not struggles['words']:
            print('\nNo struggling words. Nice!\n')
            return
        print('\n--- WORDS TO PRACTICE ---')
        for row in struggles['words']:
            print(f"  {row['item_key']:<20} {row['translation'] or '':<20} "
                  f"{row['struggle_percent_display']:>8} wrong of {row['total_attempts']}")
        print('-------------------------\n')

    def print_result(self, result: dict):
        """Print the outcome of an answer."""
        if result['correct']:
            print(f"Correct! {result['xp_delta']:+d} XP")
        else:
            print(f"Wrong. The answer was: {result['correct_translation']} ({result['xp_delta']:+d} XP)")
        if result['level_changed']:
            print(f"\n*** LEVEL UP! Now at level {result['level']} ***\n")
        print(f"Level {result['level']}: {result['current_xp']}/{result['xp_required']} XP")

    def finish(self):
        """End the session on the server and show its summary."""
        try:
            summary = self.client.end_session()
        except requests.RequestException:
            return
        print(f"\nSession: {summary['words_guessed_correctly']}/{summary['words_played']} correct, "
              f"{summary['experience_gained']:+d} XP in {summary['time_played']} min")

    def read_answer(self, word: dict) -> str | None:
        """Prompt until an answer is given. Returns None when the user exits."""
        while True:
            user_input = input('==> ').strip()
            command = user_input.lower()

            if command == 'exit':
                return None
            elif command == 'status':
                try:
                    self.print_status(self.client.get_status())
                except requests.RequestException as e:
                    print(f"Error getting status: {e}")
            elif command == 'stats':
                try:
                    self.print_struggles(self.client.get_struggles())
                except requests.RequestException as e:
                    print(f"Error getting stats: {e}")
            elif user_input.isdigit() and 1 <= int(user_input) <= len(word['choices']):
                return word['choices'][int(user_input) - 1]
            elif user_input:
                return user_input
            self.print_word(word)

    def print_word(self, word: dict):
        print(f"\n>>> {word['item_key']}  ({REASON_LABELS.get(word['reason'], word['reason'])})")
        for i, choice in enumerate(word['choices'], start=1):
            print(f'  {i}. {choice}')

    def run(self):
        """Run the main application loop."""
        # Check server connection
        try:
            health = self.client.health_check()
            print(f"Connected to sona server ({health['service']})")
        except requests.RequestException:
            print(f"Error: Cannot connect to server at {self.client.base_url}")
            print("Make sure the server is running: python run_server.py")
            return

        status = self.client.get_status()
        print(f"Restored: {status['progress_display']}")

        print(f'\nStarting {LANGUAGE} vocabulary practice!')
        print('Type the translation or its number. Commands: "status", "stats", "exit"\n')

        while True:
            try:
                word = self.client.get_next_word()
            except requests.RequestException as e:
                print(f"Error getting next word: {e}")
                return

            if word['skipped_previous']:
                print('(previous word was left unanswered and counted as wrong)')
            print(f"\n{word['progress_display']}")
            self.print_word(word)

            answer = self.read_answer(word)
            if answer is None:
                self.finish()
                print('Goodbye!')
                return

            try:
                self.print_result(self.client.submit_answer(word['item_key'], answer))
            except requests.RequestException as e:
                print(f"Error submitting answer: {e}")
