#!/usr/bin/env python3
"""
Performance Benchmark for Mail Gate

Measures validation and composition throughput with an in-memory resolver,
so the numbers exclude DNS latency.
"""

import time
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from mail_gate import EmailValidator, MessageComposer, MockResolver, MockTransport

DOMAINS = ["example.com", "company.org", "gmail.com", "yahoo.com", "outlook.com"]

VALID_EMAILS = [
    "user@example.com",
    "john.doe@company.org",
    "<alice123@gmail.com>",
    "bob_smith@yahoo.com",
    "charlie.brown@outlook.com",
]

INVALID_EMAILS = [
    "plainaddress",
    "@missing-local.com",
    "user@",
    "user@@domain.com",
    "user@unknown.example",
]

ALL_EMAILS = VALID_EMAILS + INVALID_EMAILS


def make_resolver():
    resolver = MockResolver()
    for domain in DOMAINS:
        resolver.add_host(domain, "192.0.2.1")
    return resolver


def benchmark(func, items, iterations):
    """Run func over items repeatedly and return statistics."""
    start_time = time.perf_counter()

    for _ in range(iterations):
        for item in items:
            func(item)

    total_time = time.perf_counter() - start_time
    total_requests = iterations * len(items)

    return {
        'total_time': total_time,
        'total_requests': total_requests,
        'rps': total_requests / total_time,
        'avg_time_ms': (total_time / total_requests) * 1000
    }


def report(title, result):
    print(f"\n{title}")
    print(f"  Total time: {result['total_time']:.3f}s")
    print(f"  Total requests: {result['total_requests']}")
    print(f"  RPS: {result['rps']:,.0f} requests/second")
    print(f"  Avg time: {result['avg_time_ms']:.4f}ms")


def compose_and_send(recipients):
    composer = MessageComposer(
        "sender@example.com",
        recipients,
        tolerate_partial_failure=True,
        validator=validator,
        transport=transport,
    )
    composer.set_header("cc", "boss@company.org, typo@@company.org")
    composer.send("Benchmark body", "Benchmark")


validator = EmailValidator(make_resolver())
transport = MockTransport()


def main():
    print("=" * 60)
    print("Mail Gate Performance Benchmark")
    print("=" * 60)

    print("\n[Warmup] Running 1000 iterations...")
    benchmark(validator.validate, ALL_EMAILS, iterations=1000)

    report("[Benchmark 1] Valid emails only (10,000 iterations)...",
           benchmark(validator.validate, VALID_EMAILS, iterations=10000))

    report("[Benchmark 2] Invalid emails only (10,000 iterations)...",
           benchmark(validator.validate, INVALID_EMAILS, iterations=10000))

    report("[Benchmark 3] Mixed emails (10,000 iterations)...",
           benchmark(validator.validate, ALL_EMAILS, iterations=10000))

    recipient_lists = [", ".join(ALL_EMAILS), " ".join(VALID_EMAILS)]
    transport.sent.clear()
    report("[Benchmark 4] Compose and send (5,000 iterations)...",
           benchmark(compose_and_send, recipient_lists, iterations=5000))
    transport.sent.clear()

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
