"""
Basic fluent-http Usage Examples

Demonstrates verbs, uploads, retries and error handling against httpbin.org.
"""

import logging

from fluent_http import facade as http
from fluent_http import HTTPClient, LoggingConfig
from fluent_http import ConnectionFailure, RequestFailure, HTTPClientError


def run_example(title, func):
    """Run one example and report typed failures."""
    print("\n" + "=" * 50)
    print(title)
    print("=" * 50)

    try:
        func()
    except ConnectionFailure as e:
        print(f"Connection failure: {e.message} (code={e.code})")
    except RequestFailure as e:
        print(f"Request failure: {e.message} (code={e.code})")
        if e.response is not None:
            print(f"Response body: {e.response.body()[:200]}")
    except HTTPClientError as e:
        print(f"Unknown failure: {e}")


def basic_get_request():
    response = http.get("https://httpbin.org/get", {"foo": "bar", "user_id": 123})

    print(f"Status: {response.status()}")
    print(f"Query param 'foo': {response['args']['foo']}")


def post_form():
    response = http.post("https://httpbin.org/post", {"name": "fluent", "project": "http"})

    print(f"Status: {response.status()}")
    print(f"Form field 'name': {response['form']['name']}")


def post_json_with_headers():
    response = http.with_headers({
        "X-Client-Version": "1.0.0",
        "Accept": "application/json",
    }).json("https://httpbin.org/post", {"id": 1, "tags": ["python", "requests"]})

    print(f"OK: {response.ok()}")
    print(f"JSON field 'id': {response['json']['id']}")
    print(f"Header echo: {response['headers']['X-Client-Version']}")


def put_patch_delete():
    with HTTPClient({"base_url": "https://httpbin.org"}) as client:
        for verb in ("put", "patch", "delete"):
            response = getattr(client, verb)(f"/{verb}", {"verb": verb})
            print(f"{verb.upper()}: {response.status()} json={response['json']}")


def bearer_token():
    response = http.with_token("my-secret-token").get("https://httpbin.org/bearer")

    print(f"Status: {response.status()}")
    print(f"Authenticated: {response['authenticated']}")


def upload_file():
    response = (
        http.attach("file", b"hello from fluent-http", "hello.txt")
        .attach("avatar", b"\x89PNG...", "avatar.png")
        .post("https://httpbin.org/post", {"description": "two files", "meta": {"pages": 1}})
    )

    print(f"Status: {response.status()}")
    print(f"Files: {list(response['files'])}")
    print(f"Form: {response['form']}")


def raw_body():
    response = http.with_body("<note>hi</note>", "application/xml").post("https://httpbin.org/post")

    print(f"Sent data: {response['data']}")
    print(f"Content-Type: {response['headers']['Content-Type']}")


def retry_server_errors():
    logging_config = LoggingConfig.create(level="INFO", format="colored")

    with HTTPClient({"base_url": "https://httpbin.org"}, logging=logging_config) as client:
        # 3 attempts, 100 ms between them, last 503 returned
        response = client.retry(2, 100).get("/status/503")

    print(f"Final status after retries: {response.status()}")


def throw_on_error():
    response = http.get("https://httpbin.org/status/404")

    print(f"Status: {response.status()}, client error: {response.client_error()}")
    response.throw()


def tiny_timeout():
    http.timeout(0.001).retry(1, 0).get("https://httpbin.org/delay/1")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)

    run_example("Basic GET", basic_get_request)
    run_example("POST form", post_form)
    run_example("POST JSON with headers", post_json_with_headers)
    run_example("PUT / PATCH / DELETE", put_patch_delete)
    run_example("Bearer token", bearer_token)
    run_example("Multipart upload", upload_file)
    run_example("Raw body", raw_body)
    run_example("Retry on 5xx", retry_server_errors)
    run_example("throw() on 404", throw_on_error)
    run_example("Timeout", tiny_timeout)
