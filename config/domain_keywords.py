"""Curated domain keyword table used as the fallback keyword generator.

Order matters: domains are tried top to bottom, and "general" is the
catch-all bucket used when nothing else matches.
"""

GENERAL_DOMAIN = "general"

DOMAIN_KEYWORDS = [
    {
        "domain": "general",
        "keywords": ["leadership", "coaching", "experience", "guidance", "technology", "finance"],
    },
    {
        "domain": "technology",
        "keywords": ["programming", "software", "development", "coding", "tech"],
    },
    {
        "domain": "business",
        "keywords": ["entrepreneur", "strategy", "management", "startup"],
    },
    {
        "domain": "career",
        "keywords": ["resume", "interview", "jobsearch", "career", "professional"],
    },
    {
        "domain": "marketing",
        "keywords": ["digital", "content", "seo", "socialmedia", "branding"],
    },
    {
        "domain": "finance",
        "keywords": ["investment", "financial", "money", "budget", "planning"],
    },
    {
        "domain": "engineering",
        "keywords": ["technical", "design", "hardware", "systems", "mechanical"],
    },
    {
        "domain": "health",
        "keywords": ["wellbeing", "mental", "fitness", "health", "wellness"],
    },
]
