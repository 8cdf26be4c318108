"""REST API client for sona server."""

import requests


class SonaAPIClient:
    """Client for communicating with the sona REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", user_id: str = "default"):
        self.base_url = base_url.rstrip('/')
        self.user_id = user_id
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        if params is None:
            params = {}
        params['user_id'] = self.user_id
        response = self.session.get(f"{self.base_url}{endpoint}", params=params)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict) -> dict:
        """Make a POST request."""
        data['user_id'] = self.user_id
        response = self.session.post(f"{self.base_url}{endpoint}", json=data)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        response = self.session.get(f"{self.base_url}/")
        response.raise_for_status()
        return response.json()

    def get_status(self) -> dict:
        """Get level, XP and session tally."""
        return self._get("/api/status")

    def get_next_word(self) -> dict:
        """Get the next word to answer."""
        return self._get("/api/next")

    def submit_answer(self, item_key: str, answer: str) -> dict:
        """Submit an answer for the current word."""
        return self._post("/api/answer", {
            'item_key': item_key,
            'answer': answer
        })

    def get_struggles(self) -> dict:
        """Get words that need more practice."""
        return self._get("/api/struggles")

    def end_session(self) -> dict:
        """Close the practice session and get its summary."""
        return self._post("/api/session/end", {})

    def list_users(self) -> list[str]:
        """List learners known to the server."""
        response = self.session.get(f"{self.base_url}/api/users")
        response.raise_for_status()
        return response.json()['users']
