"""
End-to-end smoke test against a running server.

Signs a throwaway user up, logs in, and fetches the profile:
    python scripts/smoke_flow.py [base_url]
"""

import json
import sys
import uuid

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8081"


def print_section(title):
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)


def print_response(response: httpx.Response):
    print(f"HTTP {response.status_code}")
    print(json.dumps(response.json(), indent=2, ensure_ascii=False))


def main():
    suffix = uuid.uuid4().hex[:10]
    email = f"smoke-{suffix}@example.com"
    password = "smoke-password"

    with httpx.Client(base_url=BASE_URL, timeout=10.0) as client:
        print_section("STEP 1: Sign up")
        response = client.post("/signup", json={
            "name": "Smoke Test",
            "aadhaar_number": f"A{suffix}",
            "mcp_card_number": f"MCP{suffix}",
            "mobile_number": f"M{suffix}",
            "email": email,
            "password": password,
            "confirm_password": password,
        })
        print_response(response)
        if response.status_code != 201:
            sys.exit(1)

        print_section("STEP 2: Log in")
        response = client.post("/login", json={"email": email, "password": password})
        print_response(response)
        if response.status_code != 200:
            sys.exit(1)
        token = response.json()["token"]

        print_section("STEP 3: Profile")
        response = client.get("/profile", headers={"authorization": token})
        print_response(response)
        if response.status_code != 200 or "password" in (response.json() or {}):
            sys.exit(1)

    print("\nAll steps passed")


if __name__ == "__main__":
    main()
