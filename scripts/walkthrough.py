"""
Signup walkthrough against a running gateway

Walks one visitor through role selection, registration, email verification
and onboarding, printing every view the gateway returns. The verification
code is typed in from the email the backend sends.

Usage: python scripts/walkthrough.py
"""

import json
import os

import requests
from dotenv import load_dotenv

load_dotenv()

BASE_URL = os.getenv("GATEWAY_URL", "http://localhost:8000")


def print_section(title):
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


def show(response):
    if response.is_redirect:
        print(f"\n↪️  {response.status_code} -> {response.headers['location']}")
        return None
    data = response.json()
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return data


def main():
    print("\n🚀 Employ.me - Signup Walkthrough")
    print(f"Gateway: {BASE_URL}\n")

    session = requests.Session()

    def post(path, payload=None):
        return session.post(f"{BASE_URL}{path}", json=payload, allow_redirects=False)

    def get(path):
        return session.get(f"{BASE_URL}{path}", allow_redirects=False)

    # ============================================================================
    # STEP 1: Role
    # ============================================================================
    print_section("STEP 1: Choose a role")

    role = input("Role [JOB_SEEKER/EMPLOYER] (default JOB_SEEKER): ").strip().upper() or "JOB_SEEKER"
    show(post("/signup/role", {"role": role}))

    # ============================================================================
    # STEP 2: Register
    # ============================================================================
    print_section("STEP 2: Create the account")

    data = show(post("/signup/register", {
        "email": input("Email: ").strip(),
        "password": input("Password: ").strip(),
        "firstName": input("First name: ").strip(),
        "lastName": input("Last name: ").strip(),
    }))
    if not data or data["state"].get("error"):
        print("\n❌ Registration did not go through")
        return

    # ============================================================================
    # STEP 3: Verify
    # ============================================================================
    print_section("STEP 3: Verify the email")

    while True:
        code = input("6-digit code (or 'resend'): ").strip()
        if code.lower() == "resend":
            show(post("/signup/resend"))
            continue
        response = post("/signup/verify", {"code": code})
        if response.is_redirect:
            show(response)
            break
        show(response)

    location = get("/login").headers.get("location")
    print(f"\n✅ Signed in, landing page: {location}")
    if location != "/onboarding":
        return

    # ============================================================================
    # STEP 4: Onboarding
    # ============================================================================
    print_section("STEP 4: Complete the profile")

    data = show(get("/onboarding"))
    draft = {}
    for field, default in data["state"]["draft"].items():
        value = input(f"{field} [{default}]: ").strip()
        draft[field] = value or default

    response = post("/onboarding", draft)
    show(response)
    if response.is_redirect:
        print_section("DASHBOARD")
        show(get(response.headers["location"]))


if __name__ == "__main__":
    main()
