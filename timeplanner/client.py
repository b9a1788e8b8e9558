# timeplanner/client.py
import os
from typing import Any, Dict, List, Optional

import requests

from .core.errors import PlannerError, error_for_code

API = os.getenv("API_URL", "http://localhost:8000/api/v1")


class PlannerClient:
    """
    Thin requests-based client for the planner API.

    Error responses are raised as the matching PlannerError subclass
    (ConflictError, MigrationFailedError, ...), so callers can branch on
    the exception type instead of on messages.
    """

    def __init__(self, base_url: str = API, session: Optional[requests.Session] = None, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.http = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        r = self.http.request(method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs)
        if r.status_code >= 400:
            try:
                body = r.json()
            except ValueError:
                body = {}
            raise _to_error(r.status_code, body)
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    # auth
    def register(self, email: str, password: str, migration_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = {"email": email, "password": password}
        if migration_data is not None:
            payload["migrationData"] = migration_data
        data = self._request("POST", "/auth/register", json=payload)
        self.token = data["access_token"]
        return data

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        return data

    # categories
    def categories(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/categories")

    def create_category(self, name: str, color: str) -> Dict[str, Any]:
        return self._request("POST", "/categories", json={"name": name, "color": color})

    def delete_category(self, category_id: str) -> None:
        self._request("DELETE", f"/categories/{category_id}")

    # templates
    def templates(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/task-templates")

    def create_template(self, title: str, duration: float, category_id: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/task-templates", json={"title": title, "duration": duration, "category_id": category_id}
        )

    # tasks
    def tasks(self, start_date: str, end_date: str) -> List[Dict[str, Any]]:
        return self._request("GET", "/tasks", params={"start_date": start_date, "end_date": end_date})

    def create_task(self, title: str, start: str, duration: float, category_id: str,
                    template_id: Optional[str] = None) -> Dict[str, Any]:
        payload = {"title": title, "start": start, "duration": duration, "category_id": category_id}
        if template_id:
            payload["template_id"] = template_id
        return self._request("POST", "/tasks", json=payload)

    def create_task_from_template(self, template_id: str, start: str) -> Dict[str, Any]:
        return self._request("POST", "/tasks/from-template", json={"template_id": template_id, "start": start})

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")


def _to_error(status_code: int, body: Dict[str, Any]) -> PlannerError:
    cls = error_for_code(body.get("error"))
    err = cls(body.get("message") or f"HTTP {status_code}", errors=body.get("errors"))
    if cls is PlannerError:
        err.status_code = status_code
    return err


def main():
    import uuid

    client = PlannerClient()
    print("--- Smoke testing planner API at", client.base_url, "---")
    print("Health:", client._request("GET", "/health"))

    email = f"smoke-{uuid.uuid4().hex[:8]}@example.com"
    bundle = {
        "categories": [{"id": "c1", "name": "Work", "color": "#336699"}],
        "templates": [{"id": "t1", "title": "Standup", "duration": 0.25, "categoryId": "c1"}],
        "tasks": [{"title": "Standup", "start": "2030-01-07T09:00:00Z", "duration": 0.25,
                   "categoryId": "c1", "templateId": "t1"}],
    }
    print("Register:", client.register(email, "Sm0ke-test!", migration_data=bundle))
    print("Categories:", client.categories())

    work = client.categories()[0]["id"]
    print("Create task:", client.create_task("Deep work", "2030-01-07T10:00:00Z", 2, work))
    try:
        client.create_task("Clash", "2030-01-07T10:30:00Z", 1, work)
    except PlannerError as exc:
        print("Overlap rejected:", exc.code, exc.message)
    print("Tasks:", client.tasks("2030-01-07", "2030-01-07"))


if __name__ == "__main__":
    main()
