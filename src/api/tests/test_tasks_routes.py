"""Unit tests for task routes."""

import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_task_repo, get_user_repo
from api.security import get_session_tokens
from adapter.fake.task_repository import FakeTaskRepository
from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import StoreError
from services import auth_service


class TaskRoutesTestCase(unittest.TestCase):

    def setUp(self):
        patcher = patch.object(auth_service, 'BCRYPT_ROUNDS', 4)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.client = TestClient(app)
        self.user_repo = FakeUserRepository()
        self.task_repo = FakeTaskRepository()
        app.dependency_overrides[get_user_repo] = lambda: self.user_repo
        app.dependency_overrides[get_task_repo] = lambda: self.task_repo

    def tearDown(self):
        """Clean up dependency overrides."""
        app.dependency_overrides.clear()

    def _login(self, email: str, password: str = 'secret123') -> dict:
        """Register and log in a user, returning bearer auth headers."""
        self.client.post("/auth/register", json={"email": email, "password": password})
        response = self.client.post("/auth/login", json={"email": email, "password": password})
        # Use explicit bearer headers so two users can share one client
        self.client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['token']}"}


class TestScenario(TaskRoutesTestCase):

    def test_register_login_create_list_delete(self):
        register = self.client.post(
            "/auth/register", json={"email": "alice@example.com", "password": "secret123"}
        )
        self.assertEqual(register.status_code, 200)

        login = self.client.post(
            "/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        self.assertEqual(login.status_code, 200)
        headers = {"Authorization": f"Bearer {login.json()['token']}"}

        created = self.client.post(
            "/tasks", json={"title": "Buy milk", "dueDate": "2025-01-01"}, headers=headers
        )
        self.assertEqual(created.status_code, 200)
        task = created.json()
        self.assertEqual(task['userId'], register.json()['id'])
        self.assertTrue(task['dueDate'].startswith('2025-01-01'))

        listed = self.client.get("/tasks", headers=headers).json()
        self.assertEqual(len(listed), 1)
        self.assertEqual(listed[0]['title'], 'Buy milk')
        self.assertFalse(listed[0]['completed'])

        deleted = self.client.delete(f"/tasks/{task['id']}", headers=headers)
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(deleted.json(), {"success": True})

        self.assertEqual(self.client.get("/tasks", headers=headers).json(), [])


class TestAuthentication(TaskRoutesTestCase):

    def test_all_routes_require_identity(self):
        requests = [
            ("GET", "/tasks", None),
            ("POST", "/tasks", {"title": "x"}),
            ("PUT", "/tasks/some-id", {"completed": True}),
            ("DELETE", "/tasks/some-id", None),
        ]
        for method, path, body in requests:
            response = self.client.request(method, path, json=body)
            self.assertEqual(response.status_code, 401, f"{method} {path}")
        self.assertEqual(self.task_repo.store, {})

    def test_invalid_token_is_401(self):
        response = self.client.get("/tasks", headers={"Authorization": "Bearer garbage"})
        self.assertEqual(response.status_code, 401)

    def test_session_cookie_authenticates(self):
        self.client.post("/auth/register", json={"email": "alice@example.com", "password": "secret123"})
        self.client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})

        response = self.client.post("/tasks", json={"title": "Buy milk"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(self.client.get("/tasks").json()), 1)

    def test_token_for_deleted_user_still_resolves(self):
        """Identity comes from the signed claim, not a user lookup."""
        token = get_session_tokens().issue('user-not-in-store').token

        response = self.client.get("/tasks", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])


class TestStoreUnavailable(TaskRoutesTestCase):
    """Real task repository dependency with no MongoDB client opened."""

    def setUp(self):
        super().setUp()
        del app.dependency_overrides[get_task_repo]
        app.state.mongo_client = None

    def test_unauthenticated_is_401_not_503(self):
        for method, path, body in (("GET", "/tasks", None), ("POST", "/tasks", {"title": "x"})):
            response = self.client.request(method, path, json=body)
            self.assertEqual(response.status_code, 401, f"{method} {path}")

    def test_authenticated_is_503(self):
        headers = self._login('alice@example.com')

        response = self.client.get("/tasks", headers=headers)

        self.assertEqual(response.status_code, 503)


class TestCreate(TaskRoutesTestCase):

    def test_missing_title_is_400(self):
        headers = self._login('alice@example.com')

        response = self.client.post("/tasks", json={"description": "no title"}, headers=headers)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.task_repo.store, {})

    def test_invalid_due_date_is_400(self):
        headers = self._login('alice@example.com')

        response = self.client.post(
            "/tasks", json={"title": "x", "dueDate": "not-a-date"}, headers=headers
        )

        self.assertEqual(response.status_code, 400)

    def test_list_newest_first(self):
        headers = self._login('alice@example.com')
        for title in ('first', 'second'):
            self.client.post("/tasks", json={"title": title}, headers=headers)

        titles = [t['title'] for t in self.client.get("/tasks", headers=headers).json()]
        self.assertEqual(titles, ['second', 'first'])


class TestUpdate(TaskRoutesTestCase):

    def setUp(self):
        super().setUp()
        self.headers = self._login('alice@example.com')
        self.task = self.client.post(
            "/tasks",
            json={"title": "Buy milk", "description": "2 litres", "dueDate": "2025-01-01"},
            headers=self.headers,
        ).json()

    def test_complete_keeps_other_fields(self):
        response = self.client.put(
            f"/tasks/{self.task['id']}", json={"completed": True}, headers=self.headers
        )

        self.assertEqual(response.status_code, 200)
        listed = self.client.get("/tasks", headers=self.headers).json()
        self.assertEqual(len(listed), 1)
        self.assertTrue(listed[0]['completed'])
        for field in ('id', 'title', 'description', 'dueDate', 'createdAt', 'userId'):
            self.assertEqual(listed[0][field], self.task[field])

    def test_null_due_date_clears_it(self):
        response = self.client.put(
            f"/tasks/{self.task['id']}", json={"dueDate": None}, headers=self.headers
        )

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.json()['dueDate'])
        self.assertEqual(response.json()['description'], '2 litres')

    def test_blank_title_is_400(self):
        response = self.client.put(
            f"/tasks/{self.task['id']}", json={"title": ""}, headers=self.headers
        )
        self.assertEqual(response.status_code, 400)

    def test_unknown_field_is_400(self):
        response = self.client.put(
            f"/tasks/{self.task['id']}", json={"userId": "someone"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 400)

    def test_other_owner_is_404(self):
        bob = self._login('bob@example.com')

        response = self.client.put(f"/tasks/{self.task['id']}", json={"completed": True}, headers=bob)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.client.get("/tasks", headers=bob).json(), [])

    def test_missing_task_is_404(self):
        response = self.client.put("/tasks/nonexistent", json={"completed": True}, headers=self.headers)
        self.assertEqual(response.status_code, 404)

    def test_store_failure_is_500(self):
        repo = MagicMock()
        repo.update.side_effect = StoreError('down')
        app.dependency_overrides[get_task_repo] = lambda: repo

        response = self.client.put(
            f"/tasks/{self.task['id']}", json={"completed": True}, headers=self.headers
        )

        self.assertEqual(response.status_code, 500)


class TestDelete(TaskRoutesTestCase):

    def test_other_owner_is_404_and_task_survives(self):
        alice = self._login('alice@example.com')
        bob = self._login('bob@example.com')
        task = self.client.post("/tasks", json={"title": "Buy milk"}, headers=alice).json()

        response = self.client.delete(f"/tasks/{task['id']}", headers=bob)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(len(self.client.get("/tasks", headers=alice).json()), 1)

    def test_store_failure_is_500(self):
        headers = self._login('alice@example.com')
        repo = MagicMock()
        repo.delete.side_effect = StoreError('down')
        app.dependency_overrides[get_task_repo] = lambda: repo

        response = self.client.delete("/tasks/task-1", headers=headers)

        self.assertEqual(response.status_code, 500)


if __name__ == '__main__':
    unittest.main()
