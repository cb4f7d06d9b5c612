from __future__ import annotations

from typing import List, Optional

from diary.schemas import SupportCategory, SupportResource
from diary.services.errors import ValidationError

CATEGORY_LABELS = {
    "emergency": "Crisis lines",
    "counseling": "Professional counseling",
    "hotline": "Helplines",
    "community": "Medical institutions",
}

SUPPORT_RESOURCES: tuple[SupportResource, ...] = (
    SupportResource(
        id="1",
        name="Suicide Prevention Hotline",
        description="24-hour crisis counseling and suicide prevention",
        phone="1393",
        website="https://www.kfsp.or.kr",
        hours="24 hours",
        category="emergency",
    ),
    SupportResource(
        id="2",
        name="Mental Health Crisis Line",
        description="Professional counseling for mental health emergencies",
        phone="1577-0199",
        website="https://www.mentalhealth.go.kr",
        hours="24 hours",
        category="emergency",
    ),
    SupportResource(
        id="3",
        name="Youth Counseling Line",
        description="Counseling for young people in difficulty or crisis",
        phone="1388",
        website="https://www.cyber1388.kr",
        hours="24 hours",
        category="hotline",
    ),
    SupportResource(
        id="4",
        name="Lifeline Korea",
        description="Suicide prevention and emotional support",
        phone="1588-9191",
        website="https://www.lifeline.or.kr",
        hours="24 hours",
        category="hotline",
    ),
    SupportResource(
        id="5",
        name="Maeum-ieum",
        description="Mental health information and referral to specialist services",
        phone="1577-0199",
        website="https://www.mentalhealth.go.kr",
        hours="Weekdays 9:00-18:00",
        category="counseling",
    ),
    SupportResource(
        id="6",
        name="Korea Psychological Counseling Center",
        description="One-to-one sessions with a licensed counselor",
        phone="1899-1231",
        website="https://www.kpcc.or.kr",
        hours="Weekdays 10:00-19:00",
        category="counseling",
    ),
    SupportResource(
        id="7",
        name="Korean Neuropsychiatric Association",
        description="Find a psychiatrist and mental health information",
        website="https://www.knpa.or.kr",
        hours="Weekdays 9:00-18:00",
        category="community",
    ),
    SupportResource(
        id="8",
        name="National Center for Mental Health",
        description="Specialist mental health care and treatment",
        phone="02-2204-0001",
        website="https://www.ncmh.go.kr",
        hours="Weekdays 9:00-18:00",
        category="community",
    ),
)


def list_categories() -> List[SupportCategory]:
    return [SupportCategory(category=k, label=v) for k, v in CATEGORY_LABELS.items()]


def list_resources(category: Optional[str] = None) -> List[SupportResource]:
    if not category:
        return list(SUPPORT_RESOURCES)
    if category not in CATEGORY_LABELS:
        raise ValidationError(f"unknown support category: {category!r}")
    return [r for r in SUPPORT_RESOURCES if r.category == category]
