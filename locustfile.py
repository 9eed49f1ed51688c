"""
Locust Load Testing File for the Mail Gate API

Run with:
    locust -f locustfile.py --host=http://localhost:5000

Then open http://localhost:8089 in your browser to control the test.
Every request triggers live DNS lookups, so response times include resolver
latency.
"""

import random
from locust import HttpUser, task, between, events


VALID_EMAILS = [
    "user@example.com",
    "john.doe@gmail.com",
    "<alice123@gmail.com>",
    "bob_smith@yahoo.com",
    "charlie.brown@outlook.com",
    "david+tag@proton.me",
]

INVALID_EMAILS = [
    "plainaddress",
    "@missing-local.com",
    "missing-domain@",
    "user@.com",
    "user@@double-at.com",
    "user@domain..com",
    "user@no-such-domain.invalid",
]

DOMAINS = ["example.com", "gmail.com", "outlook.com", "no-such-domain.invalid", "bad_domain.com"]

MIXED_EMAILS = VALID_EMAILS + INVALID_EMAILS


class MailGateUser(HttpUser):
    """
    Simulates a user of the Mail Gate validation API.
    """

    wait_time = between(0.5, 2)

    @task(10)
    def validate_email(self):
        """Validate a single address (most common operation)."""
        self.client.post(
            "/validate",
            json={"email": random.choice(MIXED_EMAILS)},
            name="/validate"
        )

    @task(5)
    def quick_check(self):
        """Quick GET validation check."""
        email = random.choice(VALID_EMAILS)
        self.client.get(
            "/quick-check",
            params={"email": email},
            name="/quick-check"
        )

    @task(3)
    def validate_domain(self):
        """Validate a domain and fetch its MX records."""
        self.client.post(
            "/validate/domain",
            json={"domain": random.choice(DOMAINS)},
            name="/validate/domain"
        )

    @task(2)
    def filter_recipients(self):
        """Filter a mixed recipient list."""
        addresses = random.sample(MIXED_EMAILS, random.randint(2, 6))
        self.client.post(
            "/recipients",
            json={"addresses": ", ".join(addresses), "header": "To"},
            name="/recipients"
        )

    @task(1)
    def validate_batch(self):
        """Validate a batch of emails."""
        emails = random.sample(MIXED_EMAILS, random.randint(5, 10))
        self.client.post(
            "/validate/batch",
            json={"emails": emails},
            name="/validate/batch"
        )

    @task(1)
    def health_check(self):
        """Health check endpoint."""
        self.client.get("/health", name="/health")


@events.request.add_listener
def on_request(request_type, name, response_time, response_length, exception, **kwargs):
    """Log failed and slow requests."""
    if exception:
        print(f"Request failed: {name} - {exception}")
    elif response_time > 1000:
        print(f"Slow request: {name} took {response_time:.2f}ms")


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    """Print summary statistics when the test stops."""
    stats = environment.stats
    print(f"\nTotal Requests: {stats.total.num_requests}")
    print(f"Total Failures: {stats.total.num_failures}")
    print(f"Median Response Time: {stats.total.median_response_time:.2f}ms")
    print(f"95th Percentile: {stats.total.get_response_time_percentile(0.95):.2f}ms")
