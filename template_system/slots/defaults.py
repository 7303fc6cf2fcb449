"""Static slot content used when neither the caller nor the content map supplies a value.

Keys are ``slot name -> field key``. Values are returned as deep copies so a
filled slot never shares mutable state with this table.
"""

from __future__ import annotations

import copy
from typing import Any

DEFAULT_SLOT_CONTENT: dict[str, dict[str, Any]] = {
    "header": {
        "brandName": "Online Store",
        "tagline": "Quality products at friendly prices",
        "logoUrl": "https://via.placeholder.com/200x60/3b82f6/ffffff?text=Logo",
    },
    "home": {
        "heroTitle": "Welcome",
        "heroSubtitle": "Quality products at friendly prices",
        "heroImage": "https://via.placeholder.com/1200x600/3b82f6/ffffff?text=Hero",
        "ctaLabel": "Start shopping",
        "feature1": {"title": "Quality", "text": "Carefully selected products", "icon": "⭐"},
        "feature2": {"title": "Fair prices", "text": "Prices that make sense", "icon": "💰"},
        "feature3": {"title": "Friendly service", "text": "Support from people who care", "icon": "❤️"},
    },
    "about": {
        "pageTitle": "About us",
        "pageSubtitle": "Our story",
        "heroImage": "https://via.placeholder.com/1200x600/3b82f6/ffffff?text=About",
        "storyTitle": "Our story",
        "storyContent": "We started with a simple idea: good products and honest service.",
        "values": ["Quality", "Fair prices", "Friendly service"],
        "team": [],
    },
    "contact": {
        "pageTitle": "Contact us",
        "pageSubtitle": "We are here to help",
        "phone": "02-123-4567",
        "email": "info@example.com",
        "contactInfo": {
            "phone": "02-123-4567",
            "email": "info@example.com",
            "address": "123 Sukhumvit Road, Bangkok 10110",
            "hours": "Open daily 9:00-18:00",
        },
        "formFields": [
            {"name": "name", "type": "text", "required": True, "placeholder": "Your name"},
            {"name": "email", "type": "email", "required": True, "placeholder": "Your email"},
            {"name": "subject", "type": "text", "required": True, "placeholder": "Subject"},
            {"name": "message", "type": "textarea", "required": True, "placeholder": "Your message"},
        ],
        "submitButton": "Send message",
    },
    "productList": {
        "title": "Our products",
        "categories": [
            {"id": "1", "name": "Category 1"},
            {"id": "2", "name": "Category 2"},
        ],
        "products": [],
    },
    "footer": {
        "columns": [
            {
                "title": "About",
                "links": [
                    {"label": "History", "href": "/about"},
                    {"label": "Team", "href": "/team"},
                ],
            },
            {
                "title": "Services",
                "links": [
                    {"label": "Delivery", "href": "/delivery"},
                    {"label": "Contact", "href": "/contact"},
                ],
            },
            {
                "title": "Information",
                "links": [
                    {"label": "Terms", "href": "/terms"},
                    {"label": "Privacy", "href": "/privacy"},
                ],
            },
        ],
        "newsletter": {"enabled": True},
        "socialLinks": [
            {"platform": "Facebook", "url": "#", "icon": "📘"},
            {"platform": "Instagram", "url": "#", "icon": "📷"},
            {"platform": "Line", "url": "#", "icon": "💬"},
        ],
    },
    "i18n": {
        "currency": "฿",
        "language": "th",
        "commonTexts": {
            "addToCart": "Add to cart",
            "buyNow": "Buy now",
            "search": "Search",
            "filter": "Filter",
        },
    },
    "theme": {
        "primaryColor": "sky-600",
        "accentColor": "amber-400",
        "borderRadius": "xl",
        "elevation": "lg",
        "gridColumns": 3,
        "fontFamily": "inter",
        "imagery": "modern clean",
        "tone": "casual",
    },
}

_MISSING = object()


def default_content(slot_name: str, field_key: str, default: Any = None) -> Any:
    """Return a copy of the static value for ``slot_name.field_key``, or *default*."""
    value = DEFAULT_SLOT_CONTENT.get(slot_name, {}).get(field_key, _MISSING)
    if value is _MISSING:
        return default
    return copy.deepcopy(value)


def has_default_content(slot_name: str, field_key: str) -> bool:
    return field_key in DEFAULT_SLOT_CONTENT.get(slot_name, {})
