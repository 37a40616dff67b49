"""
Data Loader Script - bulk-registers students from a JSON file via the API.

Reads a JSON array of registration forms (camelCase keys, as the browser
form submits them) and sends each one through RegistrationClient, so every
form gets the same shaping and validation as an interactive submission.

Usage:
    python load_data.py                                   # students_seed.json, localhost:3000
    python load_data.py seed.json                         # Custom data file
    python load_data.py seed.json http://localhost:8000   # Custom API URL
"""

import json
import os
import sys

from app.client import RegistrationClient


def main():
    data_file = sys.argv[1] if len(sys.argv) > 1 else "students_seed.json"
    api_url = sys.argv[2] if len(sys.argv) > 2 else os.getenv("API_URL", "http://localhost:3000")

    if not os.path.exists(data_file):
        print(f"Error: Could not find {data_file}")
        sys.exit(1)

    print(f"Loading data from: {data_file}")
    with open(data_file, 'r', encoding='utf-8') as f:
        forms = json.load(f)

    if not isinstance(forms, list):
        print("Error: data file must contain a JSON array of registration forms")
        sys.exit(1)

    print(f"Found {len(forms)} forms to register")
    print(f"Sending to: {api_url}")
    print()

    registered = 0
    rejected = 0
    network_errors = 0

    with RegistrationClient(api_url) as client:
        for index, form in enumerate(forms, start=1):
            outcome = client.submit(form)
            label = form.get("email") or f"form #{index}"
            if outcome.success:
                registered += 1
                print(f"  ✅ {label}: registered (id: {outcome.student.get('id', '?')})")
            elif outcome.field_errors:
                rejected += 1
                problems = "; ".join(f"{e.field}: {e.message}" for e in outcome.field_errors)
                print(f"  ❌ {label}: {problems}")
            else:
                if not outcome.submitted:
                    network_errors += 1
                else:
                    rejected += 1
                print(f"  ❌ {label}: {outcome.message}")

    print()
    print("=" * 60)
    print("REGISTRATION SUMMARY")
    print("=" * 60)
    print(f"  Total Forms:     {len(forms)}")
    print(f"  Registered:      {registered}")
    print(f"  Rejected:        {rejected}")
    print(f"  Network Errors:  {network_errors}")
    print("=" * 60)

    if network_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
