"""
Drive the gate protocol against a running backend: app requests, gate buttons, spot sensor.
Run from a host inside HARDWARE_ALLOWED_NETWORKS.

Examples:
  python scripts/test/simulate_gate.py --step request-entry --user alice
  python scripts/test/simulate_gate.py --step confirm-entry
  python scripts/test/simulate_gate.py --step sensor --spot 3
  python scripts/test/simulate_gate.py --step full --user alice --spot 3
"""

import argparse
import time
import requests

BACKEND_URL = "http://192.168.1.50:8080/api/v1"


def _show(label, resp):
    icon = "✅" if resp.ok else "❌"
    print(f"{icon} {label} → HTTP {resp.status_code}: {resp.json()}")
    return resp


def request_entry(user):
    return _show(f"request entry user={user}",
                 requests.post(f"{BACKEND_URL}/entry/request", headers={"X-User-Id": user}, timeout=10))


def request_exit(user):
    return _show(f"request exit user={user}",
                 requests.post(f"{BACKEND_URL}/exit/request", headers={"X-User-Id": user}, timeout=10))


def press_button(gate):
    return _show(f"{gate} gate button",
                 requests.post(f"{BACKEND_URL}/hardware/{gate}/confirm", timeout=10))


def report_spot(spot):
    return _show(f"sensor spot={spot}",
                 requests.post(f"{BACKEND_URL}/hardware/spots/assign", json={"spot": spot}, timeout=10))


def pay(user, ticket_id):
    return _show(f"pay {ticket_id}",
                 requests.post(f"{BACKEND_URL}/tickets/{ticket_id}/pay", headers={"X-User-Id": user}, timeout=10))


def full_cycle(user, spot, pause):
    """Entry → spot → payment → exit, pausing between physical steps."""
    if not request_entry(user).ok:
        return
    time.sleep(pause)
    resp = press_button("entry")
    if not resp.ok:
        return
    ticket_id = resp.json()["ticket_id"]
    time.sleep(pause)
    report_spot(spot)
    pay(user, ticket_id)
    if not request_exit(user).ok:
        return
    time.sleep(pause)
    press_button("exit")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate app, gate buttons and spot sensor")
    parser.add_argument("--step", default="full",
                        choices=["request-entry", "confirm-entry", "sensor", "request-exit", "confirm-exit", "full"])
    parser.add_argument("--user", default="test-user")
    parser.add_argument("--spot", default="1")
    parser.add_argument("--pause", type=float, default=2.0)
    args = parser.parse_args()

    if args.step == "request-entry":
        request_entry(args.user)
    elif args.step == "confirm-entry":
        press_button("entry")
    elif args.step == "sensor":
        report_spot(args.spot)
    elif args.step == "request-exit":
        request_exit(args.user)
    elif args.step == "confirm-exit":
        press_button("exit")
    else:
        full_cycle(args.user, args.spot, args.pause)
