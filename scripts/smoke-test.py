#!/usr/bin/env python3
"""
Smoke test for TaskAPI deployments.

Flow (default):
1. Health check
2. Issue a task (GET /api/tasks)
3. Submit the correct result
4. Submit a wrong result (expects 401 + disclosed expected value)
5. Submit without Authorization (expects 403)
6. Submit with a bad token (expects 401)
7. Submit for an unknown task id (expects 404)

Usage:
    ./scripts/smoke-test.py http://localhost:8080
    ./scripts/smoke-test.py http://localhost:8080 --health-only
"""

import argparse
import json
import random
import sys
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_RETRIES = 2
DEFAULT_RETRY_BACKOFF_SECONDS = 0.5
MAX_BACKOFF_SECONDS = 4.0
# Used when surfacing raw HTTP bodies (bytes) as a preview in error messages.
BODY_PREVIEW_BYTES = 200
UNKNOWN_TASK_ID = "00000000-0000-4000-8000-000000000000"


def log(msg: str) -> None:
    """Print timestamped log message."""
    print(f"[{datetime.now().strftime('%H:%M:%S')}] {msg}", flush=True)


def _is_retryable_status(status_code: int) -> bool:
    return status_code in {408, 425, 429, 502, 503, 504}


@dataclass
class HttpClient:
    base_url: str
    api_prefix: str = "/api"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    retries: int = DEFAULT_RETRIES
    retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> tuple[int, bytes]:
        max_attempts = max(1, self.retries + 1)
        for attempt in range(1, max_attempts + 1):
            try:
                request = Request(url, data=body, headers=headers or {}, method=method)
                try:
                    with urlopen(request, timeout=self.timeout_seconds) as response:
                        return response.getcode(), response.read()
                except HTTPError as e:
                    error_body = e.read() if e.fp else b""
                    if attempt < max_attempts and _is_retryable_status(e.code):
                        self._sleep_backoff(attempt)
                        continue
                    return e.code, error_body
            except (URLError, TimeoutError) as e:
                if attempt < max_attempts:
                    self._sleep_backoff(attempt)
                    continue
                raise RuntimeError(f"Network error after {attempt} attempts: {e}") from e

        raise RuntimeError(f"Gave up on {method} {url} after {max_attempts} attempts")

    def api_json(
        self,
        method: str,
        path: str,
        *,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> tuple[int, dict[str, Any]]:
        url = f"{self.base_url}{self.api_prefix}{path}"
        req_headers: dict[str, str] = {"Content-Type": "application/json"}
        if headers:
            req_headers.update(headers)

        body_bytes = json.dumps(data).encode() if data is not None else None
        status, body = self.request(method, url, headers=req_headers, body=body_bytes)
        try:
            return status, json.loads(body.decode())
        except json.JSONDecodeError as e:
            raise RuntimeError(
                f"Invalid JSON response from {method} {path} ({status}): "
                f"preview={body[:BODY_PREVIEW_BYTES]!r}"
            ) from e

    def _sleep_backoff(self, attempt: int) -> None:
        base = self.retry_backoff_seconds * (2 ** (attempt - 1))
        jitter = random.random() * self.retry_backoff_seconds
        time.sleep(min(MAX_BACKOFF_SECONDS, base + jitter))


def wait_for_health(client: HttpClient, max_attempts: int = 30, delay: float = 2.0) -> bool:
    """Wait for /health to return healthy status."""
    url = f"{client.base_url}/health"

    for attempt in range(1, max_attempts + 1):
        try:
            status, body = client.request("GET", url)
            if status == 200 and json.loads(body.decode()).get("status") == "healthy":
                log(f"Health check passed (attempt {attempt})")
                return True
        except (json.JSONDecodeError, RuntimeError):
            pass

        if attempt < max_attempts:
            time.sleep(delay)

    return False


def solve(task: dict[str, Any]) -> int:
    args = task["args"]
    if task["op"] == "Max":
        return max(args)
    if task["op"] == "Min":
        return min(args)
    raise RuntimeError(f"Unknown operation: {task['op']!r}")


@dataclass
class SmokeContext:
    client: HttpClient
    max_health_attempts: int

    task: dict[str, Any] | None = None

    def require_task(self) -> dict[str, Any]:
        if not self.task:
            raise RuntimeError("Missing task (step ordering bug)")
        return self.task

    def submit(self, task_id: str, result: int, authorization: str | None) -> tuple[int, dict]:
        headers = {"Authorization": authorization} if authorization is not None else None
        return self.client.api_json(
            "POST", f"/tasks/{task_id}", data={"result": result}, headers=headers
        )


def expect(label: str, status: int, body: dict[str, Any], want_status: int, **want) -> None:
    if status != want_status:
        raise RuntimeError(f"{label}: expected HTTP {want_status}, got {status}: {body}")
    for key, value in want.items():
        if body.get(key) != value:
            raise RuntimeError(f"{label}: expected {key}={value!r}, got {body.get(key)!r}")


@dataclass(frozen=True)
class Step:
    name: str
    run: Callable[[SmokeContext], None]


def step_health(ctx: SmokeContext) -> None:
    log(f"Checking health: {ctx.client.base_url}/health")
    if not wait_for_health(ctx.client, max_attempts=ctx.max_health_attempts):
        raise RuntimeError("Health check failed")


def step_issue_task(ctx: SmokeContext) -> None:
    status, body = ctx.client.api_json("GET", "/tasks")
    expect("issue task", status, body, 200)
    missing = {"task_id", "token", "op", "args"} - set(body)
    if missing:
        raise RuntimeError(f"issue task: response missing {sorted(missing)}")
    ctx.task = body
    log(f"Issued task {body['task_id']} ({body['op']} over {len(body['args'])} args)")


def step_correct_result(ctx: SmokeContext) -> None:
    task = ctx.require_task()
    answer = solve(task)
    status, body = ctx.submit(task["task_id"], answer, f"Bearer {task['token']}")
    expect("correct result", status, body, 200, success=True, expected=answer)


def step_wrong_result(ctx: SmokeContext) -> None:
    task = ctx.require_task()
    answer = solve(task)
    guess = answer - 1 if answer == 127 else answer + 1
    status, body = ctx.submit(task["task_id"], guess, f"Bearer {task['token']}")
    expect("wrong result", status, body, 401, error="incorrect result", expected=answer)


def step_missing_authorization(ctx: SmokeContext) -> None:
    task = ctx.require_task()
    status, body = ctx.submit(task["task_id"], solve(task), None)
    expect("missing authorization", status, body, 403, success=False)


def step_bad_token(ctx: SmokeContext) -> None:
    task = ctx.require_task()
    status, body = ctx.submit(task["task_id"], solve(task), "Bearer not-a-token")
    expect("bad token", status, body, 401, error="unauthorized")


def step_unknown_task(ctx: SmokeContext) -> None:
    task = ctx.require_task()
    status, body = ctx.submit(UNKNOWN_TASK_ID, 0, f"Bearer {task['token']}")
    expect("unknown task", status, body, 404, error="task id not found")


def run_steps(ctx: SmokeContext, steps: list[Step]) -> bool:
    overall_start = time.time()
    for step in steps:
        log(f"STEP: {step.name}")
        start = time.time()
        try:
            step.run(ctx)
        except Exception as e:
            log(f"FAILED: {step.name} ({time.time() - start:.2f}s) - {e}")
            return False
        log(f"OK: {step.name} ({time.time() - start:.2f}s)")

    log(f"Total: {time.time() - overall_start:.2f}s")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="TaskAPI smoke test")
    parser.add_argument("base_url", help="Base URL (e.g., http://localhost:8080)")
    parser.add_argument(
        "--api-prefix",
        default="/api",
        help="Path prefix the task routes are mounted under (default: /api)",
    )
    parser.add_argument(
        "--health-only",
        action="store_true",
        help="Only run health check, skip full flow",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help=f"HTTP timeout seconds (default: {DEFAULT_TIMEOUT_SECONDS:g})",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=DEFAULT_RETRIES,
        help=f"Retries for transient failures (default: {DEFAULT_RETRIES})",
    )
    parser.add_argument(
        "--max-health-attempts",
        type=int,
        default=30,
        help="Max health check attempts (default: 30)",
    )
    args = parser.parse_args()

    try:
        client = HttpClient(
            base_url=args.base_url.rstrip("/"),
            api_prefix=args.api_prefix.rstrip("/"),
            timeout_seconds=args.timeout,
            retries=args.retries,
        )
        ctx = SmokeContext(client=client, max_health_attempts=args.max_health_attempts)

        steps: list[Step] = [Step("health", step_health)]
        if args.health_only:
            log("Health-only mode: skipping full flow")
        else:
            steps.extend(
                [
                    Step("issue task", step_issue_task),
                    Step("correct result", step_correct_result),
                    Step("wrong result", step_wrong_result),
                    Step("missing authorization", step_missing_authorization),
                    Step("bad token", step_bad_token),
                    Step("unknown task", step_unknown_task),
                ]
            )

        return 0 if run_steps(ctx, steps) else 1
    except Exception as e:
        log(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
