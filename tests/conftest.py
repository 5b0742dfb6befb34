import asyncio
from typing import Any

import pytest

from portfolio_search.api.service import SearchService
from portfolio_search.config import Settings
from portfolio_search.ingestion.connectors.base import BaseContentSource
from portfolio_search.ingestion.normalize import normalize_entry


PROJECTS = [
    {
        "id": "payment-platform",
        "title": "Payment Gateway Platform",
        "description": "Payment processing platform for a fintech client.",
        "category": "fintech",
        "client": "Northwind Pay",
        "role": "Lead Engineer",
        "technologies": [{"name": "Python"}, {"name": "Kubernetes"}],
        "featured": True,
        "caseStudy": {"lessons": ["idempotency keys"]},
    },
    {
        "id": "design-system",
        "title": "Component Design System",
        "description": "Shared React component library and design tokens.",
        "category": "frontend",
        "technologies": [{"name": "React"}, {"name": "TypeScript"}],
    },
]

WRITINGS = [
    {
        "id": "scalable-payment-systems",
        "title": "Building Scalable Payment Systems",
        "description": "What broke when payment volume grew tenfold.",
        "url": "https://medium.com/@alex/scalable-payment-systems",
        "category": "engineering",
        "tags": ["payments", "architecture"],
        "featured": True,
        "author": "Alex Rivera",
        "source": "Medium",
    },
    {
        "id": "microservices-patterns",
        "title": "Microservices Patterns",
        "description": "Service boundaries, sagas and outbox tables.",
        "url": "https://dev.to/alex/microservices-patterns",
        "category": "engineering",
        "tags": ["architecture", "backend"],
        "featured": False,
        "author": "Alex Rivera",
        "source": "Dev.to",
    },
    {
        "id": "aws-cost-optimization",
        "title": "AWS Cost Optimization",
        "description": "Cutting the cloud bill without slowing teams down.",
        "url": "https://blog.example.com/aws-cost",
        "category": "cloud",
        "tags": ["aws", "finops"],
        "featured": True,
        "author": "Alex Rivera",
        "source": "Tech Blog",
    },
]

EXPERIENCE = [
    {
        "id": "northwind-pay",
        "position": "Senior Backend Engineer",
        "company": "Northwind Pay",
        "description": "Owned the ledger and settlement services.",
        "category": "fintech",
        "skills": ["Distributed Systems"],
        "technologies": [{"name": "Go"}],
    },
]

SKILLS = [
    {
        "id": "python",
        "name": "Python",
        "description": "Backend services and automation.",
        "category": "language",
        "tags": ["backend"],
    },
]

PROFILE = {
    "name": "Alex Rivera",
    "title": "Staff Software Engineer",
    "bio": "Engineer working on developer tooling.",
    "skills": [{"name": "System Design"}, "Mentoring"],
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeSource(BaseContentSource):
    """In-memory source that counts fetches and can be made slow or failing."""

    def __init__(
        self,
        name: str,
        record_type: str,
        document: Any,
        collection_key: str | None = None,
        delay: float = 0.0,
        error: Exception | None = None,
    ):
        super().__init__(name, record_type, collection_key)
        self.document = document
        self.delay = delay
        self.error = error
        self.calls = 0
        self.cancelled = False

    @property
    def source_name(self) -> str:
        return f"Fake {self.name}"

    async def fetch_document(self) -> Any:
        self.calls += 1
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return self.document


def make_sources() -> list[FakeSource]:
    return [
        FakeSource("projects", "project", {"projects": PROJECTS}, "projects"),
        FakeSource("writing", "writing", {"writings": WRITINGS}, "writings"),
        FakeSource("experience", "experience", {"experience": EXPERIENCE}, "experience"),
        FakeSource("skills", "skill", {"skills": SKILLS}, "skills"),
        FakeSource("person", "profile", {"person": PROFILE}, "person"),
    ]


def make_records():
    layout = [
        ("projects", "project", PROJECTS),
        ("writing", "writing", WRITINGS),
        ("experience", "experience", EXPERIENCE),
        ("skills", "skill", SKILLS),
        ("person", "profile", [PROFILE]),
    ]
    return [
        normalize_entry(name, record_type, entry)
        for name, record_type, entries in layout
        for entry in entries
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        content_ttl_seconds=300,
        index_ttl_seconds=600,
        stale_ttl_seconds=300,
        source_timeout_seconds=1.0,
    )


@pytest.fixture
def sources() -> list[FakeSource]:
    return make_sources()


@pytest.fixture
def records():
    return make_records()


@pytest.fixture
def service(sources, settings, clock) -> SearchService:
    return SearchService.create(sources=sources, settings=settings, clock=clock)
