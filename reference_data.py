"""Static reference tables: category keywords, palettes, labels, badges.

Everything here is immutable plain data so it can be inspected in tests
or swapped per market without touching the analytics code.
"""

from __future__ import annotations

import operator
from types import MappingProxyType

GENERAL_CATEGORY = "General"

# Insertion order is the categorizer's tie-break order.
CATEGORY_KEYWORDS = MappingProxyType({
    "Coding & Development": (
        "code", "programming", "python", "javascript", "typescript", "react",
        "api", "function", "variable", "database", "sql", "html", "css",
        "bug", "error", "debug", "git", "deploy", "server", "frontend",
        "backend", "algorithm", "data structure", "class", "object", "array",
        "loop", "string", "component", "framework", "library", "node",
        "npm", "webpack", "docker", "aws", "cloud", "devops", "testing",
        "java", "rust", "golang", "swift", "kotlin", "flutter", "angular",
        "vue", "nextjs", "tailwind", "mongodb", "postgres", "redis",
    ),
    "Creative Writing": (
        "write", "story", "poem", "essay", "creative", "fiction", "novel",
        "character", "plot", "narrative", "dialogue", "chapter", "draft",
        "blog", "article", "content", "copywriting", "script", "lyrics",
        "haiku", "sonnet", "prose", "metaphor",
    ),
    "Learning & Education": (
        "learn", "explain", "understand", "concept", "tutorial", "course",
        "study", "teach", "knowledge", "lesson", "theory", "practice",
        "beginner", "advanced", "fundamentals", "basics", "definition",
        "difference", "compare", "history", "science", "math", "physics",
        "chemistry", "biology", "philosophy", "economics",
    ),
    "Business & Career": (
        "business", "startup", "marketing", "strategy", "revenue", "client",
        "project", "management", "team", "leadership", "resume", "interview",
        "career", "salary", "job", "linkedin", "networking", "pitch",
        "investor", "product", "market", "sales", "growth", "kpi",
        "presentation", "proposal", "email", "professional",
    ),
    "Data & Analytics": (
        "data", "analysis", "machine learning", "ai", "model", "neural",
        "deep learning", "statistics", "visualization", "pandas", "numpy",
        "tensorflow", "pytorch", "dataset", "training", "prediction",
        "classification", "regression", "nlp", "computer vision",
        "artificial intelligence", "prompt", "llm", "transformer",
    ),
    "Personal & Lifestyle": (
        "recipe", "travel", "health", "fitness", "diet", "meditation",
        "hobby", "relationship", "advice", "life", "personal", "habit",
        "goal", "motivation", "self-improvement", "mental health",
        "workout", "sleep", "stress", "mindfulness", "cooking", "food",
    ),
    "Research & Analysis": (
        "research", "analyze", "compare", "review", "evaluate", "summarize",
        "report", "findings", "methodology", "hypothesis", "conclusion",
        "evidence", "source", "reference", "study", "paper", "journal",
        "literature", "survey", "investigation",
    ),
    "Design & Creativity": (
        "design", "ui", "ux", "figma", "logo", "brand", "color", "layout",
        "typography", "illustration", "graphic", "visual", "aesthetic",
        "wireframe", "prototype", "mockup", "icon", "animation",
        "photoshop", "canva", "image",
    ),
})

CATEGORY_NAMES = tuple(CATEGORY_KEYWORDS) + (GENERAL_CATEGORY,)

CATEGORY_NAME_KEYS = MappingProxyType({
    "Coding & Development": "coding",
    "Creative Writing": "creative",
    "Learning & Education": "learning",
    "Business & Career": "business",
    "Data & Analytics": "data",
    "Personal & Lifestyle": "personal",
    "Research & Analysis": "research",
    "Design & Creativity": "design",
    GENERAL_CATEGORY: "general",
})

CATEGORY_ICONS = MappingProxyType({
    "Coding & Development": "💻",
    "Creative Writing": "✍️",
    "Learning & Education": "📚",
    "Business & Career": "💼",
    "Data & Analytics": "📊",
    "Personal & Lifestyle": "🌟",
    "Research & Analysis": "🔬",
    "Design & Creativity": "🎨",
    GENERAL_CATEGORY: "💬",
})

CATEGORY_COLORS = MappingProxyType({
    "Coding & Development": "#6C63FF",
    "Creative Writing": "#FF6B9D",
    "Learning & Education": "#00D4AA",
    "Business & Career": "#FFB347",
    "Data & Analytics": "#4ECDC4",
    "Personal & Lifestyle": "#F472B6",
    "Research & Analysis": "#60A5FA",
    "Design & Creativity": "#A78BFA",
    GENERAL_CATEGORY: "#9CA3AF",
})

DEFAULT_CATEGORY_ICON = "💬"
DEFAULT_CATEGORY_COLOR = "#9CA3AF"

TOPIC_COLORS = (
    "#6C63FF", "#FF6B9D", "#00D4AA", "#FFB347", "#FF6B6B",
    "#4ECDC4", "#A78BFA", "#F472B6", "#34D399", "#FBBF24",
    "#60A5FA", "#C084FC",
)

# First key contained in the slug wins, so order matters.
MODEL_DISPLAY_NAMES = MappingProxyType({
    "gpt-4": "GPT-4",
    "gpt-4o": "GPT-4o",
    "gpt-4o-mini": "GPT-4o Mini",
    "gpt-4-turbo": "GPT-4 Turbo",
    "gpt-3.5-turbo": "GPT-3.5 Turbo",
    "gpt-3.5": "GPT-3.5",
    "text-davinci": "GPT-3",
    "o1-preview": "o1 Preview",
    "o1-mini": "o1 Mini",
    "o1": "o1",
    "o3-mini": "o3 Mini",
    "unknown": "Unknown Model",
})

# Index 0 is Sunday.
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
DAY_KEYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")

PEAK_PERIOD_KEYS = MappingProxyType({
    "Morning": "morning",
    "Afternoon": "afternoon",
    "Evening": "evening",
    "Night": "night",
})

# (exclusive lower bound, label, label key), checked top to bottom
MOOD_LABELS = (
    (0.3, "😄 Positive", "positive"),
    (0.1, "🙂 Good", "good"),
    (-0.1, "😐 Neutral", "neutral"),
    (-0.3, "😕 Mixed", "mixed"),
)
MOOD_FALLBACK = ("😤 Frustrated", "frustrated")

POSITIVE_WORDS = (
    "great", "good", "excellent", "amazing", "awesome", "love", "thank",
    "thanks", "perfect", "wonderful", "helpful", "fantastic", "brilliant",
    "happy", "excited", "beautiful", "cool", "nice", "impressive",
    "appreciate", "enjoy", "best", "incredible", "outstanding",
)
NEGATIVE_WORDS = (
    "bad", "wrong", "error", "fail", "hate", "terrible", "awful",
    "horrible", "broken", "bug", "issue", "problem", "frustrat",
    "confus", "difficult", "annoying", "disappoint", "worse", "worst",
    "ugly", "stupid", "boring", "useless",
)

TRAIT_COLORS = MappingProxyType({
    "curiosity": "#6C63FF",
    "verbosity": "#FF6B9D",
    "diversity": "#00D4AA",
    "consistency": "#FFB347",
    "creativity": "#A78BFA",
    "technical": "#4ECDC4",
})

ARCHETYPES = MappingProxyType({
    "midnight_coder": {
        "archetype": "The Midnight Coder",
        "emoji": "🌙",
        "description": (
            "You burn the midnight oil, crafting code while the world sleeps. "
            "Your best ideas come when the stars are out."
        ),
        "fun_title": "Night Owl Developer",
    },
    "curious_explorer": {
        "archetype": "The Curious Explorer",
        "emoji": "🧭",
        "description": (
            "Your insatiable curiosity knows no bounds. You explore every "
            "corner of knowledge with ChatGPT as your guide."
        ),
        "fun_title": "Knowledge Adventurer",
    },
    "creative_genius": {
        "archetype": "The Creative Genius",
        "emoji": "🎨",
        "description": (
            "Words are your canvas and ChatGPT is your muse. You bring ideas "
            "to life through creative expression."
        ),
        "fun_title": "Digital Storyteller",
    },
    "code_wizard": {
        "archetype": "The Code Wizard",
        "emoji": "🧙‍♂️",
        "description": (
            "You wield code like magic, turning complex problems into elegant "
            "solutions with AI as your spellbook."
        ),
        "fun_title": "Silicon Sorcerer",
    },
    "deep_thinker": {
        "archetype": "The Deep Thinker",
        "emoji": "🤔",
        "description": (
            "You don't just scratch the surface, you dive deep. Your "
            "conversations reveal a mind that loves thorough understanding."
        ),
        "fun_title": "Philosophical Mind",
    },
    "hustler": {
        "archetype": "The Hustler",
        "emoji": "🚀",
        "description": (
            "Always building, always growing. You use AI to accelerate your "
            "business ambitions and career trajectory."
        ),
        "fun_title": "AI-Powered Entrepreneur",
    },
    "eternal_student": {
        "archetype": "The Eternal Student",
        "emoji": "📚",
        "description": (
            "Learning is your superpower. You turn ChatGPT into your personal "
            "tutor for endless subjects."
        ),
        "fun_title": "Knowledge Seeker",
    },
    "ai_whisperer": {
        "archetype": "The AI Whisperer",
        "emoji": "✨",
        "description": (
            "You have a natural way with AI. Your diverse conversations show "
            "someone who truly understands how to get the best from ChatGPT."
        ),
        "fun_title": "Prompt Master",
    },
})

# Each badge unlocks when ``op(metrics[metric], threshold)`` holds; the
# metric names are produced by ``analytics._achievement_metrics``.
_ACHIEVEMENT_DEFS = (
    {"id": "first-chat", "title": "First Contact",
     "description": "Started your first conversation with ChatGPT",
     "icon": "🎉", "rarity": "common", "color": "#6C63FF",
     "metric": "total_conversations", "op": operator.ge, "threshold": 1},
    {"id": "century", "title": "Century Club",
     "description": "Had 100+ conversations",
     "icon": "💯", "rarity": "rare", "color": "#FF6B9D",
     "metric": "total_conversations", "op": operator.ge, "threshold": 100},
    {"id": "thousand", "title": "Conversation Titan",
     "description": "Had 1000+ conversations",
     "icon": "🏆", "rarity": "legendary", "color": "#FFB347",
     "metric": "total_conversations", "op": operator.ge, "threshold": 1000},
    {"id": "night-owl", "title": "Night Owl",
     "description": "Frequently chat between midnight and 5 AM",
     "icon": "🦉", "rarity": "rare", "color": "#4ECDC4",
     "metric": "is_night_owl", "op": operator.is_, "threshold": True},
    {"id": "early-bird", "title": "Early Bird",
     "description": "Your busiest hour is before 8 AM",
     "icon": "🐦", "rarity": "rare", "color": "#FBBF24",
     "metric": "busiest_hour", "op": operator.lt, "threshold": 8},
    {"id": "wordsmith", "title": "Wordsmith",
     "description": "Wrote 10,000+ words to ChatGPT",
     "icon": "📝", "rarity": "common", "color": "#A78BFA",
     "metric": "total_user_words", "op": operator.ge, "threshold": 10_000},
    {"id": "novelist", "title": "Novel Writer",
     "description": "Wrote 100,000+ words (that's a novel!)",
     "icon": "📖", "rarity": "epic", "color": "#F472B6",
     "metric": "total_user_words", "op": operator.ge, "threshold": 100_000},
    {"id": "polymath", "title": "Renaissance Mind",
     "description": "Explored 5+ different categories",
     "icon": "🎭", "rarity": "epic", "color": "#34D399",
     "metric": "category_count", "op": operator.ge, "threshold": 5},
    {"id": "marathon", "title": "Marathon Runner",
     "description": "Had a conversation with 50+ messages",
     "icon": "🏃", "rarity": "rare", "color": "#60A5FA",
     "metric": "longest_conversation_messages", "op": operator.ge, "threshold": 50},
    {"id": "speed-demon", "title": "Speed Demon",
     "description": "Averaged 3+ conversations per day",
     "icon": "⚡", "rarity": "epic", "color": "#FF6B6B",
     "metric": "avg_conversations_per_day", "op": operator.ge, "threshold": 3},
    {"id": "coder", "title": "Code Companion",
     "description": "30%+ of conversations about coding",
     "icon": "💻", "rarity": "rare", "color": "#6C63FF",
     "metric": "coding_percentage", "op": operator.ge, "threshold": 30},
    {"id": "creative", "title": "Muse Whisperer",
     "description": "20%+ of conversations about creative writing",
     "icon": "✨", "rarity": "rare", "color": "#FF6B9D",
     "metric": "creative_percentage", "op": operator.ge, "threshold": 20},
    {"id": "weekend-warrior", "title": "Weekend Warrior",
     "description": "More active on weekends than weekdays",
     "icon": "🎮", "rarity": "common", "color": "#00D4AA",
     "metric": "weekend_excess", "op": operator.gt, "threshold": 0},
    {"id": "veteran", "title": "AI Veteran",
     "description": "Active for 180+ days",
     "icon": "🎖️", "rarity": "epic", "color": "#FFB347",
     "metric": "total_days_active", "op": operator.ge, "threshold": 180},
)

ACHIEVEMENTS = tuple(MappingProxyType(badge) for badge in _ACHIEVEMENT_DEFS)
