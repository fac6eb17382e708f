"""HTTP client for the Taskboard API.

The session cookie set by signup/login lives in the ``requests.Session``
cookie jar and is sent back automatically on later calls.
"""
import requests


class ApiError(Exception):
    def __init__(self, status_code, message):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class TaskboardClient:
    def __init__(self, base_url, session=None, timeout=10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def signup(self, username, email, password):
        data = self._request("POST", "/api/auth/signup", {"username": username, "email": email, "password": password})
        return data["user"]

    def login(self, identifier, password):
        data = self._request("POST", "/api/auth/login", {"identifier": identifier, "password": password})
        return data["user"]

    def logout(self):
        self._request("POST", "/api/auth/logout")

    def me(self):
        return self._request("GET", "/api/auth/me")["user"]

    def list_tasks(self):
        return self._request("GET", "/api/tasks")

    def get_task(self, task_id):
        return self._request("GET", f"/api/tasks/{task_id}")

    def create_task(self, payload):
        return self._request("POST", "/api/tasks", payload)

    def update_task(self, task_id, payload):
        return self._request("PUT", f"/api/tasks/{task_id}", payload)

    def delete_task(self, task_id):
        self._request("DELETE", f"/api/tasks/{task_id}")

    def _request(self, method, path, payload=None):
        kwargs = {"timeout": self.timeout}
        if payload is not None:
            kwargs["json"] = payload
        resp = self.session.request(method, self.base_url + path, **kwargs)
        if not resp.ok:
            raise ApiError(resp.status_code, _error_message(resp))
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()


def _error_message(resp):
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason
    if isinstance(body, dict) and body.get("error"):
        return body["error"]
    return resp.reason
