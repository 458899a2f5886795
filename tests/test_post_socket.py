import os
import tempfile
import unittest


class TestPostNotifications(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from blogfeed import create_app
        from blogfeed.db import db
        from blogfeed.extensions.extensions import socketio
        from blogfeed.services import credential_service

        cls.app = create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
            "IMAGE_CLEANUP_ASYNC": False,
        })
        cls.db = db
        cls.socketio = socketio
        cls.flask_client = cls.app.test_client()

        with cls.app.app_context():
            cls.db.drop_all()
            cls.db.create_all()
            cls.alice_id = credential_service.register_user("alice@x.com", "Alice", "password1")
            credential_service.register_user("bob@x.com", "Bob", "password1")
            cls.alice_token = credential_service.authenticate("alice@x.com", "password1")["token"]
            cls.bob_token = credential_service.authenticate("bob@x.com", "password1")["token"]

    @classmethod
    def tearDownClass(cls):
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        self.clients = []

    def tearDown(self):
        for client in self.clients:
            if client.is_connected():
                client.disconnect()

    def _connect(self, token):
        client = self.socketio.test_client(
            self.app,
            flask_test_client=self.flask_client,
            auth={"token": token},
        )
        self.clients.append(client)
        return client

    def _post_events(self, client):
        return [
            event["args"][0]
            for event in client.get_received()
            if event["name"] == "posts"
        ]

    def test_connect_requires_valid_token(self):
        rejected = self._connect("not-a-token")
        self.assertFalse(rejected.is_connected())

        accepted = self._connect(self.bob_token)
        self.assertTrue(accepted.is_connected())
        connected = [e for e in accepted.get_received() if e["name"] == "connected"]
        self.assertEqual(len(connected), 1)

    def test_every_listener_receives_post_lifecycle_events(self):
        alice_headers = {"Authorization": f"Bearer {self.alice_token}"}
        listener_a = self._connect(self.bob_token)
        listener_b = self._connect(self.alice_token)
        listener_a.get_received()
        listener_b.get_received()

        created = self.flask_client.post(
            "/api/posts",
            json={"title": "Live post", "content": "Some content"},
            headers=alice_headers,
        ).get_json()["post"]
        self.flask_client.put(
            f"/api/posts/{created['id']}",
            json={"title": "Live post edited", "content": "Some content"},
            headers=alice_headers,
        )
        self.flask_client.delete(f"/api/posts/{created['id']}", headers=alice_headers)

        for listener in (listener_a, listener_b):
            events = self._post_events(listener)
            self.assertEqual(
                [event["action"] for event in events],
                ["newPost", "updatePost", "deletePost"],
            )
            self.assertEqual(events[0]["post"]["creator"], {"id": self.alice_id, "name": "Alice"})
            self.assertEqual(events[1]["post"]["title"], "Live post edited")
            self.assertEqual(events[2], {"action": "deletePost", "post_id": created["id"]})

    def test_late_listener_misses_earlier_events(self):
        alice_headers = {"Authorization": f"Bearer {self.alice_token}"}
        self.flask_client.post(
            "/api/posts",
            json={"title": "Early post", "content": "Some content"},
            headers=alice_headers,
        )

        late = self._connect(self.bob_token)
        self.assertEqual(self._post_events(late), [])

    def test_forbidden_delete_publishes_nothing(self):
        alice_headers = {"Authorization": f"Bearer {self.alice_token}"}
        bob_headers = {"Authorization": f"Bearer {self.bob_token}"}
        created = self.flask_client.post(
            "/api/posts",
            json={"title": "Guarded post", "content": "Some content"},
            headers=alice_headers,
        ).get_json()["post"]

        listener = self._connect(self.alice_token)
        listener.get_received()

        response = self.flask_client.delete(f"/api/posts/{created['id']}", headers=bob_headers)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self._post_events(listener), [])


if __name__ == "__main__":
    unittest.main()
